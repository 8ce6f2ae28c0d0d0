"""Personal planning backend: events, tasks, todos, signs and users."""

__version__ = "0.1.0"
