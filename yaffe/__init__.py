"""Core of a fullscreen launcher for emulated games: settings, tile groups, input and background jobs."""

__version__ = "0.8.1"