"""Exceptions shared across the coach packages."""


class ValidationError(ValueError):
    """Mood entry fields failed validation. The entry is never stored."""


class ExternalServiceError(RuntimeError):
    """Classification or reply generation failed, timed out, or was skipped.

    Always handled inside the engine, which substitutes local fallbacks.
    """

    def __init__(self, service: str, reason: str):
        super().__init__(f"{service}: {reason}")
        self.service = service
        self.reason = reason
