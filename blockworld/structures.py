"""Deterministic placement of trees, cacti and ground decoration inside a chunk."""

from __future__ import annotations

import enum
import math
from collections.abc import Iterator

from blockworld.biomes import BiomeType
from blockworld.blocks import BlockRegistry, get_registry
from blockworld.chunk import CHUNK_SIZE_Y, Chunk

_CHUNK_MAX_Y = CHUNK_SIZE_Y - 1
_TREE_CLEARANCE_HEIGHT = 12
_TREE_CLEARANCE_RADIUS = 3
_HORIZONTAL_NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def _to_int64(value: int) -> int:
    return ((int(value) + 2**63) % 2**64) - 2**63


def _has_air_around(chunk: Chunk, x: int, y: int, z: int) -> bool:
    """True when all four horizontal neighbours lie in the chunk and are air."""
    for dx, dz in _HORIZONTAL_NEIGHBOURS:
        nx, nz = x + dx, z + dz
        if not Chunk.is_valid_position(nx, y, nz) or chunk.get_block(nx, y, nz) != 0:
            return False
    return True


class StructureType(enum.Enum):
    """Kinds of structure the generator can place."""

    OAK_TREE = enum.auto()
    JUNGLE_TREE = enum.auto()
    SPRUCE_TREE = enum.auto()
    CACTUS = enum.auto()
    TALL_GRASS = enum.auto()
    FLOWER = enum.auto()


_TREES = frozenset({StructureType.OAK_TREE, StructureType.JUNGLE_TREE, StructureType.SPRUCE_TREE})


class StructureGenerator:
    """Places structures on ground blocks; every choice is derived from the seed and position."""

    def __init__(self, seed: int, registry: BlockRegistry | None = None) -> None:
        self.seed = _to_int64(seed)
        self._registry = registry if registry is not None else get_registry()

    def place_tree(self, chunk: Chunk, x: int, y: int, z: int, biome: BiomeType) -> None:
        """Place the tree that suits ``biome`` on the ground block at (x, y, z)."""
        biome = BiomeType(biome)
        if biome in (BiomeType.PLAINS, BiomeType.MOUNTAINS):
            self._place_oak_tree(chunk, x, y, z)
        elif biome is BiomeType.JUNGLE:
            self._place_jungle_tree(chunk, x, y, z)
        elif biome is BiomeType.SNOW:
            self._place_spruce_tree(chunk, x, y, z)

    def place_cactus(self, chunk: Chunk, x: int, y: int, z: int) -> None:
        """Grow a cactus of one to three blocks upward from (x, y, z)."""
        if not Chunk.is_valid_position(x, y, z) or not Chunk.is_valid_position(x, y + 3, z):
            return
        if not self.can_place(chunk, x, y, z, StructureType.CACTUS):
            return
        cactus_id = self._registry.id_of("cactus")
        height = self.random_in_range(1, 3, x, y, z)
        for ny in range(y, y + height):
            if not Chunk.is_valid_position(x, ny, z) or not _has_air_around(chunk, x, ny, z):
                break
            chunk.set_block(x, ny, z, cactus_id)

    def place_tall_grass(self, chunk: Chunk, x: int, y: int, z: int) -> None:
        """Put tall grass on top of the ground block at (x, y, z)."""
        if not Chunk.is_valid_position(x, y, z) or not Chunk.is_valid_position(x, y + 1, z):
            return
        if not self.can_place(chunk, x, y, z, StructureType.TALL_GRASS):
            return
        chunk.set_block(x, y + 1, z, self._registry.id_of("tall_grass"))

    def place_flower(self, chunk: Chunk, x: int, y: int, z: int) -> None:
        """Put a flower on top of the ground block at (x, y, z), if flowers are registered."""
        if not Chunk.is_valid_position(x, y, z) or not Chunk.is_valid_position(x, y + 1, z):
            return
        if not self.can_place(chunk, x, y, z, StructureType.FLOWER):
            return
        flower_id = self._registry.id_of("flower")
        if flower_id == 0:
            return
        chunk.set_block(x, y + 1, z, flower_id)

    def can_place(self, chunk: Chunk, x: int, y: int, z: int, structure_type: StructureType) -> bool:
        """Whether a structure of the given type may stand on the ground block at (x, y, z)."""
        ids = self._registry.id_of
        ground = chunk.get_block(x, y, z)
        structure_type = StructureType(structure_type)

        if structure_type in _TREES:
            if ground == 0:
                return False
            if ground not in {ids("grass"), ids("dirt"), ids("snow_grass")}:
                return False
            top = min(y + _TREE_CLEARANCE_HEIGHT, _CHUNK_MAX_Y)
            r = _TREE_CLEARANCE_RADIUS
            return not any(
                chunk.get_block(nx, ny, nz) != 0
                for ny in range(y + 1, top + 1)
                for nx in range(x - r, x + r + 1)
                for nz in range(z - r, z + r + 1)
                if Chunk.is_valid_position(nx, ny, nz)
            )
        if structure_type is StructureType.CACTUS:
            return ground == ids("sand")
        if ground not in (ids("grass"), ids("snow_grass"), ids("dirt")):
            return False
        return chunk.get_block(x, y + 1, z) == 0

    def random_in_range(self, min_value: int, max_value: int, x: int, y: int, z: int) -> int:
        """Integer in ``[min_value, max_value]`` determined by the seed and position."""
        if min_value >= max_value:
            return min_value
        hashed = _to_int64(self.seed ^ (x * 73856093) ^ (y * 19349663) ^ (z * 83492791))
        value = ((hashed >> 16) ^ hashed) & 0x7FFFFFFF
        return min_value + value % (max_value - min_value + 1)

    def _trunk(self, chunk: Chunk, x: int, y: int, z: int, height: int, log_id: int) -> None:
        for ny in range(y + 1, y + height + 1):
            if not Chunk.is_valid_position(x, ny, z):
                break
            chunk.set_block(x, ny, z, log_id)

    def _leaf_layer(
        self, chunk: Chunk, x: int, ny: int, z: int, radius: int, slack: float, leaves_id: int
    ) -> Iterator[tuple[int, int]]:
        """Fill a rough disc of leaves into air cells, yielding each cell that was filled."""
        for nx in range(x - radius, x + radius + 1):
            for nz in range(z - radius, z + radius + 1):
                if not Chunk.is_valid_position(nx, ny, nz) or chunk.get_block(nx, ny, nz) != 0:
                    continue
                dx, dz = nx - x, nz - z
                if math.sqrt(dx * dx + dz * dz) <= radius + slack:
                    chunk.set_block(nx, ny, nz, leaves_id)
                    yield nx, nz

    def _place_oak_tree(self, chunk: Chunk, x: int, y: int, z: int) -> None:
        if not self.can_place(chunk, x, y, z, StructureType.OAK_TREE):
            return
        ids = self._registry.id_of
        leaves_id = ids("oak_leaves")
        height = self.random_in_range(4, 6, x, y, z)
        self._trunk(chunk, x, y, z, height, ids("oak_log"))

        canopy_base = y + height - 1
        canopy_top = y + height + 1
        for ny in range(canopy_base, canopy_top + 1):
            radius = 1 if ny == canopy_top else 2
            for _ in self._leaf_layer(chunk, x, ny, z, radius, 0.2, leaves_id):
                pass

    def _place_jungle_tree(self, chunk: Chunk, x: int, y: int, z: int) -> None:
        if not self.can_place(chunk, x, y, z, StructureType.JUNGLE_TREE):
            return
        ids = self._registry.id_of
        leaves_id = ids("jungle_leaves")
        vines_id = ids("vines")
        height = self.random_in_range(8, 12, x, y, z)
        self._trunk(chunk, x, y, z, height, ids("jungle_log"))

        canopy_base = y + height - 2
        canopy_top = y + height + 2
        for ny in range(canopy_base, canopy_top + 1):
            radius = 2 + (ny - canopy_base) // 2
            for nx, nz in self._leaf_layer(chunk, x, ny, z, radius, 0.5, leaves_id):
                if self.random_in_range(0, 3, nx, ny, nz) != 0:
                    continue
                for vine_y in range(ny - 1, ny - 4, -1):
                    if not Chunk.is_valid_position(nx, vine_y, nz) or chunk.get_block(nx, vine_y, nz) != 0:
                        break
                    chunk.set_block(nx, vine_y, nz, vines_id)

    def _place_spruce_tree(self, chunk: Chunk, x: int, y: int, z: int) -> None:
        if not self.can_place(chunk, x, y, z, StructureType.SPRUCE_TREE):
            return
        ids = self._registry.id_of
        leaves_id = ids("spruce_leaves")
        height = self.random_in_range(6, 10, x, y, z)
        self._trunk(chunk, x, y, z, height, ids("spruce_log"))

        canopy_base = y + height // 2
        canopy_top = y + height
        for ny in range(canopy_base, canopy_top + 1):
            radius = max(1, 3 - (ny - canopy_base) // 2)
            for _ in self._leaf_layer(chunk, x, ny, z, radius, 0.3, leaves_id):
                pass