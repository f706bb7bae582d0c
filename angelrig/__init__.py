"""Heuristic landmark detection and rig asset generation for humanoid meshes."""

__version__ = "0.1.0"

__all__ = ["assets", "landmarks", "pipeline", "solver", "template"]