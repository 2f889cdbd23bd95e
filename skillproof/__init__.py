"""Evidence aggregation and skill construction engine."""

__version__ = "0.1.0"
