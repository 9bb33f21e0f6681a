"""Streaming of chunks around a camera: generation, meshing and unloading."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType

from blockworld.blocks import BlockRegistry, get_registry
from blockworld.chunk import Chunk, ChunkCoord
from blockworld.mesh import AtlasRegion, ChunkMesh

logger = logging.getLogger(__name__)

ChunkGenerator = Callable[[Chunk, ChunkCoord], None]

DEFAULT_GENERATE_PER_FRAME = 1
DEFAULT_MESH_PER_FRAME = 2
DEFAULT_UNLOAD_MARGIN = 2

_NEIGHBOR_OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class _UniqueQueue:
    """FIFO queue that holds each item at most once."""

    def __init__(self) -> None:
        self._order: deque[ChunkCoord] = deque()
        self._members: set[ChunkCoord] = set()

    def push(self, item: ChunkCoord) -> None:
        if item not in self._members:
            self._members.add(item)
            self._order.append(item)

    def pop(self) -> ChunkCoord:
        item = self._order.popleft()
        self._members.discard(item)
        return item

    def clear(self) -> None:
        self._order.clear()
        self._members.clear()

    def __bool__(self) -> bool:
        return bool(self._order)

    def __len__(self) -> int:
        return len(self._order)


class ChunkManager:
    """Keeps the chunks within a render distance of the camera loaded and meshed.

    ``generator`` fills a freshly created chunk with blocks; without one,
    generated chunks stay empty. Meshing needs a texture atlas, set with
    :meth:`set_texture_atlas`.
    """

    def __init__(
        self,
        generator: ChunkGenerator | None = None,
        registry: BlockRegistry | None = None,
        generate_per_frame: int = DEFAULT_GENERATE_PER_FRAME,
        mesh_per_frame: int = DEFAULT_MESH_PER_FRAME,
        unload_margin: int = DEFAULT_UNLOAD_MARGIN,
    ) -> None:
        self._generator = generator
        self._registry = registry if registry is not None else get_registry()
        self.generate_per_frame = generate_per_frame
        self.mesh_per_frame = mesh_per_frame
        self.unload_margin = unload_margin
        self._atlas: Mapping[str, AtlasRegion] | None = None
        self._chunks: dict[ChunkCoord, Chunk] = {}
        self._meshes: dict[ChunkCoord, ChunkMesh] = {}
        self._generation_queue = _UniqueQueue()
        self._mesh_queue = _UniqueQueue()
        self._last_camera_chunk = ChunkCoord(0, 0)

    @property
    def chunks(self) -> Mapping[ChunkCoord, Chunk]:
        """Read-only view of the loaded chunks."""
        return MappingProxyType(self._chunks)

    @property
    def meshes(self) -> Mapping[ChunkCoord, ChunkMesh]:
        """Read-only view of the built meshes."""
        return MappingProxyType(self._meshes)

    def update(self, camera_position: Sequence[float], render_distance: int) -> None:
        """Queue, generate, mesh and unload chunks for one frame."""
        render_distance = max(0, render_distance)
        camera_chunk = ChunkCoord.from_world_pos(camera_position[0], camera_position[2])

        if camera_chunk != self._last_camera_chunk:
            logger.debug("Camera moved to chunk %s", camera_chunk)
            self._last_camera_chunk = camera_chunk

        for coord in self.chunks_in_radius(camera_chunk, render_distance):
            if coord not in self._chunks:
                self._generation_queue.push(coord)

        generated = 0
        while self._generation_queue and generated < self.generate_per_frame:
            coord = self._generation_queue.pop()
            if coord not in self._chunks:
                self._generate_chunk(coord)
                generated += 1

        meshed = 0
        while self._mesh_queue and meshed < self.mesh_per_frame:
            self._mesh_chunk(self._mesh_queue.pop())
            meshed += 1

        max_distance = render_distance + self.unload_margin
        far_away = [
            coord
            for coord in self._chunks
            if coord.distance_squared(camera_chunk) > max_distance * max_distance
        ]
        for coord in far_away:
            self.unload_chunk(coord)

        for coord, chunk in self._chunks.items():
            if chunk.dirty:
                self._mesh_queue.push(coord)
                chunk.dirty = False

    def get_chunk(self, coord: ChunkCoord) -> Chunk | None:
        """The loaded chunk at ``coord``, or None."""
        return self._chunks.get(coord)

    def has_chunk(self, coord: ChunkCoord) -> bool:
        return coord in self._chunks

    def get_or_create_chunk(self, coord: ChunkCoord) -> Chunk:
        """The chunk at ``coord``, creating an empty one if it is not loaded."""
        chunk = self._chunks.get(coord)
        if chunk is not None:
            return chunk
        chunk = Chunk(coord)
        self._chunks[coord] = chunk
        self._mesh_queue.push(coord)
        self._mark_neighbors_dirty(coord)
        return chunk

    def unload_chunk(self, coord: ChunkCoord) -> None:
        """Drop a chunk and its mesh."""
        logger.debug("Unloading chunk %s", coord)
        self._chunks.pop(coord, None)
        self._meshes.pop(coord, None)
        self._mark_neighbors_dirty(coord)

    def get_mesh(self, coord: ChunkCoord) -> ChunkMesh | None:
        """The mesh built for ``coord``, or None."""
        return self._meshes.get(coord)

    def set_texture_atlas(self, atlas: Mapping[str, AtlasRegion] | None) -> None:
        """Set the atlas used for meshing; None disables meshing."""
        self._atlas = atlas

    def chunks_in_radius(self, center: ChunkCoord, radius: int) -> list[ChunkCoord]:
        """Coordinates within a circle of ``radius`` chunks, ordered by x then z."""
        return [
            coord
            for x in range(center.x - radius, center.x + radius + 1)
            for z in range(center.z - radius, center.z + radius + 1)
            if (coord := ChunkCoord(x, z)).distance_squared(center) <= radius * radius
        ]

    def shutdown(self) -> None:
        """Drop every chunk, mesh and queued task."""
        logger.info(
            "Shutting down ChunkManager. Removing %d chunks and %d meshes.",
            len(self._chunks),
            len(self._meshes),
        )
        self._generator = None
        self._chunks.clear()
        self._meshes.clear()
        self._generation_queue.clear()
        self._mesh_queue.clear()

    def __len__(self) -> int:
        return len(self._chunks)

    def _generate_chunk(self, coord: ChunkCoord) -> None:
        chunk = Chunk(coord)
        if self._generator is not None:
            self._generator(chunk, coord)
        else:
            logger.warning("Terrain generator not initialized, chunk will remain empty: %s", coord)
        self._chunks[coord] = chunk
        logger.debug("Generated chunk %s", coord)
        self._mesh_queue.push(coord)
        self._mark_neighbors_dirty(coord)

    def _mesh_chunk(self, coord: ChunkCoord) -> None:
        if self._atlas is None:
            logger.warning("Cannot mesh chunk %s without a texture atlas.", coord)
            return
        chunk = self._chunks.get(coord)
        if chunk is None:
            return
        if chunk.is_empty:
            self._meshes.pop(coord, None)
            return
        mesh = ChunkMesh(coord, self._registry)
        mesh.generate(chunk, self._chunks.get, self._atlas)
        self._meshes[coord] = mesh
        chunk.dirty = False
        logger.debug("Meshed chunk %s", coord)

    def _mark_neighbors_dirty(self, coord: ChunkCoord) -> None:
        for dx, dz in _NEIGHBOR_OFFSETS:
            neighbor = ChunkCoord(coord.x + dx, coord.z + dz)
            chunk = self._chunks.get(neighbor)
            if chunk is not None:
                chunk.dirty = True
                self._mesh_queue.push(neighbor)