"""
Application-level exceptions.

Every error raised by the engine derives from CreditPassportError so callers
can catch the whole family. Errors are local to a single operation and carry
the data needed for diagnosis (status and body, raw model text, failed stage).
"""

from __future__ import annotations


class CreditPassportError(Exception):
    """Base class for all Credit Passport errors."""


class ConfigurationError(CreditPassportError):
    """A required setting (usually a credential) is missing. Raised before any request."""


class TransportError(CreditPassportError):
    """
    An external collaborator returned a non-success response or could not be reached.

    status_code is None when no HTTP response was received at all.
    """

    def __init__(self, message: str, *, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is None:
            return base
        return f"{base} (status={self.status_code})"


class ExtractionParseError(CreditPassportError):
    """The extraction response could not be read as a JSON object. raw_text is kept verbatim."""

    def __init__(self, message: str, *, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class PersistenceError(CreditPassportError):
    """
    Content storage or the chain write failed after a successful extraction.

    stage is "content" or "chain". When the chain write fails, the content
    reference already obtained is kept in content_reference_id; nothing is
    rolled back.
    """

    def __init__(
        self,
        message: str,
        *,
        stage: str,
        content_reference_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.stage = stage
        self.content_reference_id = content_reference_id
