"""Discord bot that runs a short pick-then-act dialogue with a single user."""

__all__ = ["__version__"]

__version__ = "0.1.0"
