"""Scene, mesh, image and lighting building blocks for a deferred 3D renderer."""

__version__ = "0.1.0"