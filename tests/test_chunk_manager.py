import pytest

from blockworld.blocks import BlockRegistry
from blockworld.chunk import CHUNK_SIZE_X, CHUNK_SIZE_Z, Chunk, ChunkCoord
from blockworld.chunk_manager import ChunkManager


@pytest.fixture
def registry():
    reg = BlockRegistry()
    reg.initialize()
    return reg


def _floor_generator(registry, calls=None):
    stone = registry.id_of("stone")

    def generate(chunk, coord):
        if calls is not None:
            calls.append(coord)
        for x in range(CHUNK_SIZE_X):
            for z in range(CHUNK_SIZE_Z):
                chunk.set_block(x, 0, z, stone)

    return generate


def test_chunks_in_radius_order_and_bounds(registry):
    manager = ChunkManager(registry=registry)
    center = ChunkCoord(0, 0)
    coords = manager.chunks_in_radius(center, 1)
    assert coords == [
        ChunkCoord(-1, 0),
        ChunkCoord(0, -1),
        ChunkCoord(0, 0),
        ChunkCoord(0, 1),
        ChunkCoord(1, 0),
    ]
    wide = manager.chunks_in_radius(ChunkCoord(3, -2), 4)
    assert all(c.distance_squared(ChunkCoord(3, -2)) <= 16 for c in wide)
    assert wide == sorted(wide)


def test_chunks_in_radius_zero_is_center(registry):
    manager = ChunkManager(registry=registry)
    assert manager.chunks_in_radius(ChunkCoord(2, 5), 0) == [ChunkCoord(2, 5)]


def test_update_generates_camera_chunk(registry):
    calls = []
    manager = ChunkManager(_floor_generator(registry, calls), registry)
    manager.update((40.0, 70.0, -5.0), 0)
    expected = ChunkCoord.from_world_pos(40.0, -5.0)
    assert calls == [expected]
    assert manager.has_chunk(expected)
    assert len(manager) == 1
    assert manager.get_chunk(expected).block_count == CHUNK_SIZE_X * CHUNK_SIZE_Z


def test_negative_render_distance_acts_as_zero(registry):
    manager = ChunkManager(registry=registry, generate_per_frame=10)
    manager.update((0.0, 0.0, 0.0), -3)
    assert list(manager.chunks) == [ChunkCoord(0, 0)]


def test_generation_is_limited_per_frame(registry):
    manager = ChunkManager(_floor_generator(registry), registry, generate_per_frame=2)
    manager.update((0.0, 0.0, 0.0), 1)
    assert len(manager) == 2
    manager.update((0.0, 0.0, 0.0), 1)
    manager.update((0.0, 0.0, 0.0), 1)
    assert set(manager.chunks) == set(manager.chunks_in_radius(ChunkCoord(0, 0), 1))


def test_meshes_built_with_atlas(registry):
    manager = ChunkManager(_floor_generator(registry), registry)
    manager.set_texture_atlas({})
    manager.update((0.0, 0.0, 0.0), 0)
    mesh = manager.get_mesh(ChunkCoord(0, 0))
    assert mesh is not None
    assert not mesh.is_empty
    assert mesh.vertex_count % 4 == 0
    assert mesh.index_count * 2 == mesh.vertex_count * 3
    assert manager.get_chunk(ChunkCoord(0, 0)).dirty is False


def test_no_meshes_without_atlas(registry):
    manager = ChunkManager(_floor_generator(registry), registry)
    for _ in range(3):
        manager.update((0.0, 0.0, 0.0), 0)
    assert manager.has_chunk(ChunkCoord(0, 0))
    assert manager.get_mesh(ChunkCoord(0, 0)) is None
    assert len(manager.meshes) == 0


def test_empty_chunk_gets_no_mesh(registry):
    manager = ChunkManager(None, registry)
    manager.set_texture_atlas({})
    manager.update((0.0, 0.0, 0.0), 0)
    assert manager.get_chunk(ChunkCoord(0, 0)).is_empty
    assert manager.get_mesh(ChunkCoord(0, 0)) is None


def test_far_chunks_are_unloaded(registry):
    manager = ChunkManager(_floor_generator(registry), registry, unload_margin=0)
    manager.set_texture_atlas({})
    manager.update((0.0, 0.0, 0.0), 0)
    assert manager.has_chunk(ChunkCoord(0, 0))
    manager.update((CHUNK_SIZE_X * 5.0, 0.0, 0.0), 0)
    assert not manager.has_chunk(ChunkCoord(0, 0))
    assert manager.get_mesh(ChunkCoord(0, 0)) is None
    assert manager.has_chunk(ChunkCoord(5, 0))


def test_chunks_within_margin_are_kept(registry):
    manager = ChunkManager(_floor_generator(registry), registry, unload_margin=2)
    manager.update((0.0, 0.0, 0.0), 0)
    manager.update((CHUNK_SIZE_X * 2.0, 0.0, 0.0), 0)
    assert manager.has_chunk(ChunkCoord(0, 0))
    assert manager.has_chunk(ChunkCoord(2, 0))


def test_get_or_create_chunk_returns_same_chunk(registry):
    manager = ChunkManager(registry=registry)
    coord = ChunkCoord(3, 4)
    first = manager.get_or_create_chunk(coord)
    second = manager.get_or_create_chunk(coord)
    assert first is second
    assert isinstance(first, Chunk)
    assert first.position == coord
    assert len(manager) == 1


def test_creating_chunk_marks_neighbors_dirty(registry):
    manager = ChunkManager(registry=registry)
    neighbor = manager.get_or_create_chunk(ChunkCoord(0, 0))
    neighbor.dirty = False
    manager.get_or_create_chunk(ChunkCoord(1, 0))
    assert neighbor.dirty is True


def test_unload_chunk_removes_it(registry):
    manager = ChunkManager(registry=registry)
    coord = ChunkCoord(-2, 7)
    manager.get_or_create_chunk(coord)
    manager.unload_chunk(coord)
    assert not manager.has_chunk(coord)
    assert manager.get_chunk(coord) is None
    assert len(manager) == 0


def test_shutdown_clears_everything(registry):
    manager = ChunkManager(_floor_generator(registry), registry, generate_per_frame=5)
    manager.set_texture_atlas({})
    manager.update((0.0, 0.0, 0.0), 1)
    assert len(manager) > 0
    manager.shutdown()
    assert len(manager) == 0
    assert len(manager.meshes) == 0


def test_chunks_view_is_read_only(registry):
    manager = ChunkManager(registry=registry)
    manager.get_or_create_chunk(ChunkCoord(0, 0))
    with pytest.raises(TypeError):
        manager.chunks[ChunkCoord(1, 1)] = Chunk(ChunkCoord(1, 1))