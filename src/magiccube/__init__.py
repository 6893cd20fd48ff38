"""magiccube — recursive cube-subdivision fractal engine."""

__version__ = "0.1.0"
