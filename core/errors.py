"""
Exception types shared by the companion client and the API.
"""


class MoodMateError(Exception):
    """Base class for errors raised by this package."""


class CaptureError(MoodMateError):
    """No camera frame could be captured; aborts the pipeline."""


class ModelLoadError(MoodMateError):
    """A model tier failed to load."""


class SessionBusy(MoodMateError):
    """A capture was requested while models load or a detection is running."""


class SuggestionError(MoodMateError):
    """A suggestion could not be fetched from the proxy endpoints."""


class UpstreamError(MoodMateError):
    """A third-party API (jokes, quotes) returned nothing usable."""


class ClassificationUnavailable(MoodMateError):
    """Every remote classification path failed at the transport level."""

    def __init__(self, message: str, detail=None):
        super().__init__(message)
        self.detail = detail
