"""Greedy meshing of chunk block faces into textured quads."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from blockworld.blocks import BlockFace, BlockRegistry, get_registry
from blockworld.chunk import CHUNK_SIZE_X, CHUNK_SIZE_Y, CHUNK_SIZE_Z, Chunk, ChunkCoord

logger = logging.getLogger(__name__)

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]
ChunkLookup = Callable[[ChunkCoord], "Chunk | None"]


class MeshFaceDirection(enum.Enum):
    """Direction a meshed face points in, in meshing order."""

    POS_X = 0
    NEG_X = 1
    POS_Y = 2
    NEG_Y = 3
    POS_Z = 4
    NEG_Z = 5

    @property
    def is_positive(self) -> bool:
        return self in (MeshFaceDirection.POS_X, MeshFaceDirection.POS_Y, MeshFaceDirection.POS_Z)


@dataclass(frozen=True)
class AtlasRegion:
    """Rectangle of a texture atlas in UV space."""

    u0: float
    v0: float
    u1: float
    v1: float


@dataclass(frozen=True)
class BlockVertex:
    """One vertex of a chunk mesh."""

    position: Vec3
    normal: Vec3
    uv: Vec2


_NORMALS: dict[MeshFaceDirection, Vec3] = {
    MeshFaceDirection.POS_X: (1.0, 0.0, 0.0),
    MeshFaceDirection.NEG_X: (-1.0, 0.0, 0.0),
    MeshFaceDirection.POS_Y: (0.0, 1.0, 0.0),
    MeshFaceDirection.NEG_Y: (0.0, -1.0, 0.0),
    MeshFaceDirection.POS_Z: (0.0, 0.0, 1.0),
    MeshFaceDirection.NEG_Z: (0.0, 0.0, -1.0),
}

_U_AXES: dict[MeshFaceDirection, Vec3] = {
    MeshFaceDirection.POS_X: (0.0, 0.0, 1.0),
    MeshFaceDirection.NEG_X: (0.0, 0.0, -1.0),
    MeshFaceDirection.POS_Y: (1.0, 0.0, 0.0),
    MeshFaceDirection.NEG_Y: (1.0, 0.0, 0.0),
    MeshFaceDirection.POS_Z: (1.0, 0.0, 0.0),
    MeshFaceDirection.NEG_Z: (-1.0, 0.0, 0.0),
}

_V_AXES: dict[MeshFaceDirection, Vec3] = {
    MeshFaceDirection.POS_X: (0.0, 1.0, 0.0),
    MeshFaceDirection.NEG_X: (0.0, 1.0, 0.0),
    MeshFaceDirection.POS_Y: (0.0, 0.0, 1.0),
    MeshFaceDirection.NEG_Y: (0.0, 0.0, -1.0),
    MeshFaceDirection.POS_Z: (0.0, 1.0, 0.0),
    MeshFaceDirection.NEG_Z: (0.0, 1.0, 0.0),
}

_BLOCK_FACES: dict[MeshFaceDirection, BlockFace] = {
    MeshFaceDirection.POS_X: BlockFace.RIGHT,
    MeshFaceDirection.NEG_X: BlockFace.LEFT,
    MeshFaceDirection.POS_Y: BlockFace.TOP,
    MeshFaceDirection.NEG_Y: BlockFace.BOTTOM,
    MeshFaceDirection.POS_Z: BlockFace.BACK,
    MeshFaceDirection.NEG_Z: BlockFace.FRONT,
}

# (normal axis, u axis, v axis) as indices into (x, y, z).
_AXES: dict[MeshFaceDirection, tuple[int, int, int]] = {
    MeshFaceDirection.POS_X: (0, 2, 1),
    MeshFaceDirection.NEG_X: (0, 2, 1),
    MeshFaceDirection.POS_Y: (1, 0, 2),
    MeshFaceDirection.NEG_Y: (1, 0, 2),
    MeshFaceDirection.POS_Z: (2, 0, 1),
    MeshFaceDirection.NEG_Z: (2, 0, 1),
}

_DEFAULT_UVS: tuple[Vec2, Vec2, Vec2, Vec2] = ((0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0))
_POSITIVE_WINDING = (0, 1, 2, 2, 1, 3)
_NEGATIVE_WINDING = (0, 2, 1, 2, 3, 1)


def face_normal(face: MeshFaceDirection) -> Vec3:
    """Unit normal of a face direction."""
    return _NORMALS[MeshFaceDirection(face)]


def face_u_axis(face: MeshFaceDirection) -> Vec3:
    """Direction in which a quad's width grows."""
    return _U_AXES[MeshFaceDirection(face)]


def face_v_axis(face: MeshFaceDirection) -> Vec3:
    """Direction in which a quad's height grows."""
    return _V_AXES[MeshFaceDirection(face)]


def to_block_face(face: MeshFaceDirection) -> BlockFace:
    """Block face whose texture is used for a face direction."""
    return _BLOCK_FACES[MeshFaceDirection(face)]


def should_render_face(block_id: int, neighbor_id: int, registry: BlockRegistry | None = None) -> bool:
    """Whether the face of ``block_id`` that touches ``neighbor_id`` is visible."""
    if block_id == 0:
        return False
    if registry is None:
        registry = get_registry()
    block = registry.get(block_id)
    if not block.is_opaque and not block.is_transparent:
        return False
    if neighbor_id == block_id:
        return False
    if neighbor_id == 0:
        return True
    neighbor = registry.get(neighbor_id)
    if neighbor.is_opaque:
        return False
    if block.is_transparent and neighbor.is_transparent:
        return False
    return True


def _add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def _scale(a: Vec3, factor: float) -> Vec3:
    return (a[0] * factor, a[1] * factor, a[2] * factor)


class ChunkMesh:
    """Vertices and triangle indices for the visible faces of one chunk."""

    def __init__(self, position: ChunkCoord, registry: BlockRegistry | None = None) -> None:
        self.position = position
        self._registry = registry if registry is not None else get_registry()
        self._vertices: list[BlockVertex] = []
        self._indices: list[int] = []

    @property
    def vertices(self) -> tuple[BlockVertex, ...]:
        return tuple(self._vertices)

    @property
    def indices(self) -> tuple[int, ...]:
        return tuple(self._indices)

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def index_count(self) -> int:
        return len(self._indices)

    @property
    def is_empty(self) -> bool:
        return not self._vertices

    def clear(self) -> None:
        """Drop all geometry."""
        self._vertices.clear()
        self._indices.clear()

    def generate(
        self,
        chunk: Chunk,
        chunk_lookup: ChunkLookup | None = None,
        atlas: Mapping[str, AtlasRegion] | None = None,
    ) -> None:
        """Rebuild the mesh from ``chunk``.

        ``chunk_lookup`` returns the loaded chunk at a coordinate, or None;
        it is used to hide faces against neighbouring chunks. ``atlas`` maps
        texture names to atlas regions.
        """
        self.clear()
        if chunk.is_empty:
            return
        top = self._highest_layer(chunk)
        visibility: dict[tuple[int, int], bool] = {}
        for face in MeshFaceDirection:
            self._greedy_mesh_face(chunk, chunk_lookup, atlas or {}, face, top, visibility)
        if self._vertices:
            logger.debug(
                "Generated chunk mesh at %s | Vertices: %d | Indices: %d",
                self.position,
                len(self._vertices),
                len(self._indices),
            )

    @staticmethod
    def _highest_layer(chunk: Chunk) -> int:
        for y in range(CHUNK_SIZE_Y - 1, -1, -1):
            if any(chunk.get_block(x, y, z) for z in range(CHUNK_SIZE_Z) for x in range(CHUNK_SIZE_X)):
                return y
        return -1

    def _greedy_mesh_face(
        self,
        chunk: Chunk,
        chunk_lookup: ChunkLookup | None,
        atlas: Mapping[str, AtlasRegion],
        face: MeshFaceDirection,
        top: int,
        visibility: dict[tuple[int, int], bool],
    ) -> None:
        # Layers above ``top`` hold only air and produce no faces.
        dims = (CHUNK_SIZE_X, top + 1, CHUNK_SIZE_Z)
        axis, u_axis, v_axis = _AXES[face]
        axis_limit, u_limit, v_limit = dims[axis], dims[u_axis], dims[v_axis]
        positive = face.is_positive
        step = 1 if positive else -1

        for k in range(axis_limit):
            mask = [0] * (u_limit * v_limit)
            for v in range(v_limit):
                for u in range(u_limit):
                    coords = [0, 0, 0]
                    coords[axis] = k
                    coords[u_axis] = u
                    coords[v_axis] = v
                    block_id = chunk.get_block(*coords)
                    if block_id == 0:
                        continue
                    coords[axis] += step
                    neighbor_id = self._neighbor_block(chunk, chunk_lookup, *coords)
                    key = (block_id, neighbor_id)
                    visible = visibility.get(key)
                    if visible is None:
                        visible = visibility[key] = should_render_face(block_id, neighbor_id, self._registry)
                    if visible:
                        mask[u + v * u_limit] = block_id

            for v in range(v_limit):
                u = 0
                while u < u_limit:
                    block_id = mask[u + v * u_limit]
                    if block_id == 0:
                        u += 1
                        continue
                    width = 1
                    while u + width < u_limit and mask[u + width + v * u_limit] == block_id:
                        width += 1
                    height = 1
                    while v + height < v_limit and all(
                        mask[u + w + (v + height) * u_limit] == block_id for w in range(width)
                    ):
                        height += 1
                    for hv in range(height):
                        row = (v + hv) * u_limit
                        mask[row + u : row + u + width] = [0] * width
                    self._emit_quad(atlas, face, block_id, k, u, v, width, height)
                    u += width

    def _emit_quad(
        self,
        atlas: Mapping[str, AtlasRegion],
        face: MeshFaceDirection,
        block_id: int,
        k: int,
        u: int,
        v: int,
        width: int,
        height: int,
    ) -> None:
        axis, u_axis, v_axis = _AXES[face]
        positive = face.is_positive
        u_dir, v_dir = _U_AXES[face], _V_AXES[face]

        base = [0.0, 0.0, 0.0]
        base[axis] = float(k) + (1.0 if positive else 0.0)
        base[u_axis] = float(u)
        base[v_axis] = float(v)
        if u_dir[u_axis] < 0.0:
            base[u_axis] += 1.0
        if v_dir[v_axis] < 0.0:
            base[v_axis] += 1.0
        origin: Vec3 = (base[0], base[1], base[2])

        u_vec = _scale(u_dir, float(width))
        v_vec = _scale(v_dir, float(height))
        uvs = self._block_uvs(atlas, block_id, face)
        normal = _NORMALS[face]

        base_index = len(self._vertices)
        corners = (origin, _add(origin, u_vec), _add(origin, v_vec), _add(_add(origin, u_vec), v_vec))
        self._vertices.extend(BlockVertex(corner, normal, uv) for corner, uv in zip(corners, uvs))
        winding = _POSITIVE_WINDING if positive else _NEGATIVE_WINDING
        self._indices.extend(base_index + offset for offset in winding)

    def _block_uvs(
        self, atlas: Mapping[str, AtlasRegion], block_id: int, face: MeshFaceDirection
    ) -> tuple[Vec2, Vec2, Vec2, Vec2]:
        block = self._registry.get(block_id)
        block_face = _BLOCK_FACES[face]
        region = atlas.get(block.texture_for(block_face))
        if region is None:
            logger.warning("Missing texture atlas entry for block %r face: %d", block.name, int(block_face))
            return _DEFAULT_UVS
        return (
            (region.u0, region.v0),
            (region.u1, region.v0),
            (region.u0, region.v1),
            (region.u1, region.v1),
        )

    @staticmethod
    def _neighbor_block(chunk: Chunk, chunk_lookup: ChunkLookup | None, x: int, y: int, z: int) -> int:
        if Chunk.is_valid_position(x, y, z):
            return chunk.get_block(x, y, z)
        if y < 0 or y >= CHUNK_SIZE_Y or chunk_lookup is None:
            return 0
        chunk_x, chunk_z = chunk.position.x, chunk.position.z
        if x < 0:
            chunk_x -= 1
            x += CHUNK_SIZE_X
        elif x >= CHUNK_SIZE_X:
            chunk_x += 1
            x -= CHUNK_SIZE_X
        if z < 0:
            chunk_z -= 1
            z += CHUNK_SIZE_Z
        elif z >= CHUNK_SIZE_Z:
            chunk_z += 1
            z -= CHUNK_SIZE_Z
        neighbor = chunk_lookup(ChunkCoord(chunk_x, chunk_z))
        if neighbor is None:
            return 0
        return neighbor.get_block(x, y, z)