"""classvote: a small class voting API on FastAPI and MongoDB."""

__version__ = "1.0.0"
