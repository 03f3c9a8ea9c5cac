"""Centralized message constants for error messages and log output."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Playback Errors
    INVALID_PLAYBACK_SPEED = "Playback speed must be greater than 0, got {speed}"
    INVALID_SEEK_SECONDS = "Seek offset cannot be negative, got {seconds}"
    NO_STREAM_URL_FOR_TRACK = "No stream URL found for {link}"
    RESOURCE_CREATION_FAILED = "Could not create an audio resource for {link}"

    # Transport Errors
    TRANSPORT_STATE_TIMEOUT = "Voice transport did not reach {status} within {timeout}s"

    # Config Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Wiring Errors
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    SESSION_ALREADY_EXISTS = "Guild {guild_id} already has a playback session"


class LogTemplates:
    """Log message templates.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters.
    """

    # Startup
    CORE_STARTING = "Starting guild player (environment: %s, log level: %s)"
    CORE_READY = "Guild player ready"

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"

    # Queue Engine
    ADVANCE_LOCKED = "Queue lock prevented a concurrent advance in guild %s"
    ADVANCE_SKIPPED_NOT_IDLE = "Player in guild %s is %s, not advancing"
    ADVANCE_QUEUE_REFILLED = "Refilled queue from loop in guild %s (%d tracks, shuffled=%s)"
    ADVANCE_QUEUE_EXHAUSTED = "Queue exhausted in guild %s"
    ADVANCE_DISCARDED_AFTER_STOP = "Session in guild %s stopped while loading %s, discarding resource"
    ADVANCE_FAILURE_CAP = "Gave up after %d consecutive unplayable tracks in guild %s"
    ADVANCE_IDLE_DEFERRED = "Track in guild %s ended while its advance was still running, retrying after"
    TRACK_STARTED = "Playing new track %s (%s) in guild %s"
    TRACK_FAILED = "Could not play track %s (%s) in guild %s: %r"
    TRACK_SEEKED = "Seeked to %ss in %s in guild %s"
    SEEK_DISCARDED = "Current track in guild %s changed while loading a seek to %ss, discarding resource"
    QUEUE_SKIPPED = "Skipping current track and %d more in guild %s"
    SPEED_REJECTED = "Ignoring playback speed %s in guild %s, it must be greater than 0"
    SEEK_REJECTED = "Ignoring seek to %ss in guild %s, the offset cannot be negative"

    # Play Time
    PLAYTIME_PAUSED = "Paused at %.0f"
    PLAYTIME_RESUMED = "Resumed after being paused for %.0f milliseconds (total %.0f)"

    # Player
    PLAYER_STATE_CHANGED = "Player in guild %s: %s -> %s"
    PLAYER_STOPPED = "Stopped player in guild %s"
    PLAYER_SOURCE_ERROR = "Audio source error in guild %s: %r"
    PLAYER_STALE_CALLBACK = "Ignoring finished callback from superseded source in guild %s"
    PLAYER_LISTENER_ERROR = "Player listener raised in guild %s"

    # Connection Supervisor
    TRANSPORT_STATE_CHANGED = "Voice transport in guild %s: %s -> %s"
    TRANSPORT_AMBIGUOUS_CLOSE = "Voice transport in guild %s closed with code %s, waiting %ss to reconnect"
    TRANSPORT_PROBABLY_KICKED = "Voice transport in guild %s did not reconnect, treating as kicked"
    TRANSPORT_REJOIN_SCHEDULED = "Rejoining voice in guild %s in %ss (attempt %d/%d)"
    TRANSPORT_REJOIN_EXHAUSTED = "Voice transport in guild %s exceeded %d rejoin attempts"
    TRANSPORT_NOT_READY = "Voice transport in guild %s was not ready within %ss"
    TRANSPORT_DESTROYED = "Voice transport in guild %s destroyed, stopping playback"

    # Session Lifecycle
    SESSION_CREATED = "Created session for guild %s"
    SESSION_STOPPED = "Stopped session in guild %s"
    SESSION_CLOSED = "Closed session for guild %s"
    SESSION_DESTROYED = "Destroyed session for guild %s (%s)"
    SESSION_NOT_FOUND = "No session for guild %s"
    SESSION_TEARDOWN_FAILED = "Error tearing down session for guild %s"

    # Notifications
    NOW_PLAYING_NO_CHANNEL = "No player-updates channel configured for guild %s"
    NOW_PLAYING_NOT_TEXT = "Player-updates channel %s in guild %s is not a text channel"
    NOW_PLAYING_FAILED = "Failed to post now-playing message for guild %s"
    NOW_PLAYING_SENT = "Posted now-playing message for guild %s in channel %s"

    # Audio Resources
    RESOURCE_CREATED = "Created audio resource for %s (speed=%s, seek=%s)"
    YTDLP_CACHE_HIT = "Stream URL cache hit for %s"
    YTDLP_CACHE_EVICTED = "Stream URL cache full, evicted %s"
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info for %s"
    YTDLP_NO_STREAM_URL = "No stream URL in extraction result for %s"

    # Events
    EVENT_HANDLER_ERROR = "Error in handler for %s: %s"
