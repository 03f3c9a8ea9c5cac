"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from guild_player.application.interfaces.audio_player import AudioPlayer
from guild_player.application.interfaces.audio_source import AudioResourceFactory
from guild_player.application.interfaces.session_hooks import NowPlayingNotifier, SessionRegistry
from guild_player.application.interfaces.voice_transport import VoiceTransport

__all__ = [
    "AudioPlayer",
    "AudioResourceFactory",
    "NowPlayingNotifier",
    "SessionRegistry",
    "VoiceTransport",
]
