"""Error taxonomy for resume extraction and field resolution.

Deterministic extraction never fails, so only the store lookups and the
model path raise. Field resolution converts model-path errors into an
``llm_error`` answer; the routers map everything else to HTTP statuses.
"""


class AutofillError(Exception):
    """Base class for all service errors."""


class NoResumeError(AutofillError):
    def __init__(self, message: str = "No resume uploaded. Upload a resume first.") -> None:
        super().__init__(message)


class NoExtractionError(AutofillError):
    def __init__(self, message: str = "Resume not extracted. Call POST /api/extract first.") -> None:
        super().__init__(message)


class GatewayError(AutofillError):
    """The language-model server failed or could not be reached."""


class GatewayTimeoutError(GatewayError):
    pass


class GatewayEmptyResponseError(GatewayError):
    pass


class GatewayNotFoundError(GatewayError):
    """The requested model does not exist on the server."""

    def __init__(self, model: str) -> None:
        super().__init__(f"Model '{model}' not found in local Ollama")
        self.model = model


class ModelSwapConflictError(AutofillError):
    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Active model is '{actual}', expected '{expected}'")
        self.expected = expected
        self.actual = actual


class MalformedModelOutputError(AutofillError):
    """Model output did not match the requested JSON shape, even after sanitizing."""
