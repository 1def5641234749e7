"""fittrack: cascading delete and duplicate for a training-program hierarchy."""

__version__ = "0.1.0"
