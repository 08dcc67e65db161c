from .token_acquisition_strategy import ITokenAcquisitionStrategy
from .token_provider import ITokenProvider
from .transit_gateway import ITransitGateway

__all__ = [
    "ITokenAcquisitionStrategy",
    "ITokenProvider",
    "ITransitGateway",
]
