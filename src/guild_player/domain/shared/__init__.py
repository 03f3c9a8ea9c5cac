"""
Shared Domain Kernel

Contains exceptions, constrained types and the event bus shared across the package.
"""

from guild_player.domain.shared.exceptions import (
    AudioResourceError,
    DomainError,
    TransportTimeoutError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "AudioResourceError",
    "TransportTimeoutError",
]
