"""JDC portal installation sync backend."""

__version__ = "1.0.0"
