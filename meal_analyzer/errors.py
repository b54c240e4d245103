"""Failure taxonomy for the analysis pipeline.

Every error carries a stable ``kind`` (what the caller sees), an HTTP status
for the web adapter, and a public message that never includes provider text.
Full detail stays in ``str(exc)`` and in the chained ``__cause__``.
"""

from typing import Optional


class AnalysisError(Exception):
    kind = "internal-error"
    status_code = 500
    public_message = "Unable to analyze food image at this time"

    def __init__(
        self,
        detail: str = "",
        *,
        status_code: Optional[int] = None,
        public_message: Optional[str] = None,
    ):
        super().__init__(detail or self.public_message)
        if status_code is not None:
            self.status_code = status_code
        if public_message is not None:
            self.public_message = public_message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.public_message}


class ValidationFailure(AnalysisError):
    """Bad caller input. Raised before any external call."""

    kind = "validation-failed"
    status_code = 400
    public_message = "Invalid analysis request"

    def __init__(self, detail: str, **kwargs):
        # validation detail is about the caller's own input, safe to show
        kwargs.setdefault("public_message", detail)
        super().__init__(detail, **kwargs)


class ConfigurationFailure(AnalysisError):
    kind = "configuration-unavailable"
    status_code = 503
    public_message = "AI service is not configured"


class UpstreamAuthFailure(AnalysisError):
    kind = "configuration-unavailable"
    status_code = 503
    public_message = "AI service authentication failed"


class UpstreamRateLimited(AnalysisError):
    kind = "rate-limited"
    status_code = 429
    public_message = "Too many requests, please try again later"


class UpstreamTimeout(AnalysisError):
    kind = "upstream-timeout"
    status_code = 504
    public_message = "AI service took too long to respond"


class UpstreamMalformed(AnalysisError):
    """The call succeeded but the reply carries no usable text."""

    kind = "invalid-upstream-response"
    status_code = 502
    public_message = "Invalid response from AI service"


class UpstreamTransportFailure(AnalysisError):
    kind = "internal-error"
    status_code = 502
    public_message = "Failed to communicate with AI service"


class ResponseParsingFailure(AnalysisError):
    kind = "malformed-response"
    status_code = 502
    public_message = "Failed to parse AI response"


class InternalFailure(AnalysisError):
    pass
