"""
Application Layer

Orchestrates domain objects and infrastructure ports for a guild's playback session.

Structure:
- interfaces/: Port interfaces for the voice transport, player and other collaborators
- services/: The queue engine, connection supervisor, session and registry
"""
