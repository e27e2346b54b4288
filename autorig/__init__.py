"""Building blocks for automatic rigging: vectors, derivatives, meshes, projectors and distance fields."""

__version__ = "0.1.0"