"""Exceptions raised by the translation pipeline.

Document-level errors abort a job; batch-level errors are handled by the
controller and never escape it.
"""


class TranslationPipelineError(Exception):
    """Base class for translation pipeline errors."""


class MissingCredentialsError(TranslationPipelineError):
    """No API key is configured for the generation endpoint."""


class SourceFetchError(TranslationPipelineError):
    """The subtitle document could not be retrieved."""


class ParseError(TranslationPipelineError):
    """The subtitle document yielded no cues."""


class RateLimitedError(TranslationPipelineError):
    """The generation endpoint asked us to slow down."""


class EndpointError(TranslationPipelineError):
    """The generation endpoint failed for this request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
