"""vidshot - video intake and screenshot generation pipeline."""

__version__ = "0.1.0"
