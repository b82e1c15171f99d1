"""statusboard - terminal task board with fractional ordering and task filters."""

__version__ = "0.1.0"
