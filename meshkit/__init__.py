"""Geometry processing: transforms, curves, half-edge meshes, Laplacians, ICP and conformal maps."""

__version__ = "0.1.0"