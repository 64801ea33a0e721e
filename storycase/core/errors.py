"""Server-side failure types for the generation pipeline."""
from __future__ import annotations


class StorycaseError(Exception):
    """Base class for generation service errors."""


class ConfigurationError(StorycaseError):
    """Raised at startup when the selected provider cannot be configured."""


class GenerationError(StorycaseError):
    """The call to the text-generation service failed."""


class MalformedResponseError(StorycaseError):
    """
    The model answered, but not with a JSON array of test case objects.

    ``raw`` keeps the unmodified model text so it can be returned to the
    caller for diagnosis.
    """

    def __init__(self, message: str, raw: str) -> None:
        super().__init__(message)
        self.raw = raw
