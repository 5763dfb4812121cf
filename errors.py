# errors.py
from enum import Enum


class ErrorKind(str, Enum):
    """How the caller should react to a failed analysis."""
    UNAUTHORIZED = "unauthorized"  # re-prompt for an API key
    TRANSIENT = "transient"        # network / service trouble, user may retry
    INVALID = "invalid"            # request or response did not fit the contract


class ParseError(ValueError):
    """Raised when pasted or uploaded CSV text yields no usable rows."""


class AnalysisError(Exception):
    """Raised by the analysis gateway, tagged with an ErrorKind."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.INVALID):
        super().__init__(message)
        self.kind = kind
