"""Runtime helpers: error model, address type and amount conversion."""

from .errors import ErrorCode, MassaError

__all__ = [
    "ErrorCode",
    "MassaError",
]
