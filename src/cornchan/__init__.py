"""cornchan: anonymous image-board backend."""

__version__ = "0.1.0"
