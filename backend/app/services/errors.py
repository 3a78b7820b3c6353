"""Error types raised by the generation pipeline and its collaborators."""


class InvalidRequestError(ValueError):
    """Request rejected before any service call (empty source, count out of bounds, incomplete attempt)."""


class NoUsableContentError(ValueError):
    """The AI answered, but nothing survived validation."""


class GenerationUnavailableError(RuntimeError):
    """The generation service could not be reached or returned unparseable content."""
