"""Base exception classes for domain-level errors."""

from __future__ import annotations

from guild_player.domain.shared.messages import ErrorMessages


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class AudioResourceError(DomainError):
    """Raised when a track cannot be turned into a playable audio resource."""

    def __init__(self, link: str, message: str | None = None) -> None:
        msg = message or ErrorMessages.RESOURCE_CREATION_FAILED.format(link=link)
        super().__init__(msg, code="AUDIO_RESOURCE_ERROR")
        self.link = link


class TransportTimeoutError(DomainError):
    """Raised when the voice transport does not reach a state in time."""

    def __init__(self, status: str, timeout: float, message: str | None = None) -> None:
        msg = message or ErrorMessages.TRANSPORT_STATE_TIMEOUT.format(status=status, timeout=timeout)
        super().__init__(msg, code="TRANSPORT_TIMEOUT")
        self.status = status
        self.timeout = timeout
