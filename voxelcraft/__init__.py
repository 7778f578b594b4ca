"""Voxel world core: chunks, Perlin terrain, face meshing, ray picking, cameras and OBJ loading."""

__version__ = "0.1.0"

__all__ = ["camera", "chunk", "controls", "mesh", "noise", "objparser", "triangulate", "world"]