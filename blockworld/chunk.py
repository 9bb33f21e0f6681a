"""Chunk coordinates and fixed-size block storage for one chunk column."""

from __future__ import annotations

import math
from array import array
from dataclasses import dataclass

CHUNK_SIZE_X = 16
CHUNK_SIZE_Y = 256
CHUNK_SIZE_Z = 16
CHUNK_VOLUME = CHUNK_SIZE_X * CHUNK_SIZE_Y * CHUNK_SIZE_Z


@dataclass(frozen=True, order=True)
class ChunkCoord:
    """Horizontal position of a chunk, ordered by x then z."""

    x: int
    z: int

    @staticmethod
    def from_world_pos(world_x: float, world_z: float) -> ChunkCoord:
        """Chunk that contains a world position."""
        return ChunkCoord(math.floor(world_x / CHUNK_SIZE_X), math.floor(world_z / CHUNK_SIZE_Z))

    def to_world_pos(self) -> tuple[float, float, float]:
        """World position of the chunk's minimum corner at y = 0."""
        return (float(self.x * CHUNK_SIZE_X), 0.0, float(self.z * CHUNK_SIZE_Z))

    def manhattan_distance(self, other: ChunkCoord) -> int:
        return abs(self.x - other.x) + abs(self.z - other.z)

    def distance_squared(self, other: ChunkCoord) -> int:
        dx = self.x - other.x
        dz = self.z - other.z
        return dx * dx + dz * dz

    def __str__(self) -> str:
        return f"Chunk({self.x}, {self.z})"


class Chunk:
    """Block ids of one chunk, with a dirty flag and a count of non-air blocks."""

    SIZE_X = CHUNK_SIZE_X
    SIZE_Y = CHUNK_SIZE_Y
    SIZE_Z = CHUNK_SIZE_Z
    VOLUME = CHUNK_VOLUME

    def __init__(self, position: ChunkCoord) -> None:
        self.position = position
        self.dirty = True
        self._blocks = array("H", bytes(2 * CHUNK_VOLUME))
        self._block_count = 0

    @staticmethod
    def is_valid_position(x: int, y: int, z: int) -> bool:
        return 0 <= x < CHUNK_SIZE_X and 0 <= y < CHUNK_SIZE_Y and 0 <= z < CHUNK_SIZE_Z

    @staticmethod
    def _index(x: int, y: int, z: int) -> int:
        return x + z * CHUNK_SIZE_X + y * CHUNK_SIZE_X * CHUNK_SIZE_Z

    def get_block(self, x: int, y: int, z: int) -> int:
        """Block id at a local position; positions outside the chunk read as air."""
        if not self.is_valid_position(x, y, z):
            return 0
        return self._blocks[self._index(x, y, z)]

    def set_block(self, x: int, y: int, z: int, block_id: int) -> None:
        """Set a block; positions outside the chunk are ignored."""
        if not self.is_valid_position(x, y, z):
            return
        index = self._index(x, y, z)
        previous = self._blocks[index]
        if previous == block_id:
            return
        self._blocks[index] = block_id
        if previous != 0:
            self._block_count -= 1
        if block_id != 0:
            self._block_count += 1
        self.dirty = True

    def fill(self, block_id: int) -> None:
        """Set every block in the chunk to one id."""
        self._blocks = array("H", [block_id]) * CHUNK_VOLUME
        self._block_count = 0 if block_id == 0 else CHUNK_VOLUME
        self.dirty = True

    @property
    def block_count(self) -> int:
        """Number of non-air blocks."""
        return self._block_count

    @property
    def is_empty(self) -> bool:
        return self._block_count == 0

    def __repr__(self) -> str:
        return f"Chunk(position={self.position!r}, blocks={self._block_count})"