"""Voxel world core: blocks, chunks, biome selection, structures, meshing, culling, streaming and input events."""

__version__ = "0.1.0"

__all__ = [
    "blocks",
    "chunk",
    "biomes",
    "frustum",
    "structures",
    "events",
    "mesh",
    "chunk_manager",
]