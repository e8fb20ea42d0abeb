"""Broadcast TCP relay server, raw float32 audio streaming client and JSON chat sender."""

__version__ = "0.1.0"
__all__ = ["audio", "client", "messenger", "server"]