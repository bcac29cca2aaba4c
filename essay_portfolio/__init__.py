"""Essay portfolio linking engine."""

__version__ = "0.1.0"
