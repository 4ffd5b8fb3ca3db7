"""User accounts, credential validation and the follow graph."""

__version__ = "1.0.0"
