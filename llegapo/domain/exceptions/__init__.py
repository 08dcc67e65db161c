from .upstream import AcquisitionError, LlegapoError, UpstreamError, ValidationError

__all__ = [
    "AcquisitionError",
    "LlegapoError",
    "UpstreamError",
    "ValidationError",
]
