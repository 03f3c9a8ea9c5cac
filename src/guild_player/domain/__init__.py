"""
Domain Layer

Contains pure playback logic organized by bounded contexts:
- shared/: Cross-cutting exceptions, types and events
- music/: Track, queue and play-time domain logic
"""

from guild_player.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
