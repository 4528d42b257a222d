"""Error types raised by the inspector services."""

from __future__ import annotations


class InspectorError(Exception):
    """Base class for failures scoped to a single inspector operation."""


class SizeLimitExceeded(InspectorError):
    """Uploaded media is larger than the accepted ceiling."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Media is {size} bytes; the limit is {limit} bytes.")
        self.size = size
        self.limit = limit


class ModelUnavailable(InspectorError):
    """The model endpoint could not be reached or refused the request."""


class ModelTimeout(ModelUnavailable):
    """The model endpoint did not answer within the configured timeout."""


class SchemaViolation(InspectorError):
    """The model answered with text that does not match the declared schema."""


class NoMediaLoaded(InspectorError):
    """The session has no uploaded media to work on."""


class AnalysisInProgress(InspectorError):
    """An analysis for the current media is already pending."""


class MediaSuperseded(InspectorError):
    """The media was replaced or cleared while a request was in flight."""
