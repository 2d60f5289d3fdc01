# =============================================================================
# core/errors.py  —  Error taxonomy for the Vitally adapter
# =============================================================================
#
# Every failure an operation can surface is one of these classes.  The tools/
# layer converts them into a single protocol-level error message; nothing in
# core/ knows about that conversion.
#
#   ValidationError  →  bad or missing arguments (raised before any network)
#   UpstreamError    →  the Vitally API could not be reached
#   ApiError         →  the Vitally API answered with a non-2xx status
#   NotFoundError    →  unknown tool / resource, or an empty upstream record
# =============================================================================

from typing import Iterable


class VitallyError(Exception):
    """Base class for every error raised by the adapter."""


class ValidationError(VitallyError):
    """One or more tool arguments are missing, empty or of the wrong type."""

    def __init__(self, message: str, fields: Iterable[str] = ()):
        super().__init__(message)
        self.fields = tuple(fields)


class UpstreamError(VitallyError):
    """The upstream API call failed before a response was received."""


class ApiError(UpstreamError):
    """The upstream API returned a non-success HTTP status."""

    def __init__(self, status_code: int, reason: str = ""):
        super().__init__(f"API call failed: {status_code} {reason}".rstrip())
        self.status_code = status_code
        self.reason = reason


class NotFoundError(VitallyError):
    """A tool, resource or record could not be resolved."""
