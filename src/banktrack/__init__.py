"""Banking transaction analytics over Jaeger trace spans."""

__version__ = "0.1.0"
