import pytest

from blockworld.chunk import Chunk, ChunkCoord


def test_coord_string_format():
    assert str(ChunkCoord(3, -4)) == "Chunk(3, -4)"


def test_coord_equality_and_hash():
    assert ChunkCoord(1, 2) == ChunkCoord(1, 2)
    assert len({ChunkCoord(1, 2), ChunkCoord(1, 2), ChunkCoord(2, 1)}) == 2


def test_coord_ordering_x_then_z():
    coords = [ChunkCoord(1, 0), ChunkCoord(0, 5), ChunkCoord(0, -1)]
    assert sorted(coords) == [ChunkCoord(0, -1), ChunkCoord(0, 5), ChunkCoord(1, 0)]


@pytest.mark.parametrize("coord", [ChunkCoord(0, 0), ChunkCoord(-3, 7), ChunkCoord(12, -12)])
def test_world_pos_round_trip(coord):
    wx, wy, wz = coord.to_world_pos()
    assert wy == 0.0
    assert ChunkCoord.from_world_pos(wx, wz) == coord
    assert ChunkCoord.from_world_pos(wx + Chunk.SIZE_X - 0.01, wz + Chunk.SIZE_Z - 0.01) == coord


def test_from_world_pos_floors_negative_values():
    assert ChunkCoord.from_world_pos(-0.5, -0.5) == ChunkCoord(-1, -1)


def test_distances():
    a = ChunkCoord(0, 0)
    b = ChunkCoord(3, -4)
    assert a.manhattan_distance(b) == 7
    assert a.distance_squared(b) == 25
    assert b.distance_squared(a) == a.distance_squared(b)
    assert a.manhattan_distance(a) == 0


def test_new_chunk_is_empty_and_dirty():
    chunk = Chunk(ChunkCoord(2, 3))
    assert chunk.is_empty
    assert chunk.dirty
    assert chunk.block_count == 0
    assert chunk.position == ChunkCoord(2, 3)
    assert chunk.get_block(0, 0, 0) == 0


def test_set_and_get_block_counts():
    chunk = Chunk(ChunkCoord(0, 0))
    chunk.dirty = False
    chunk.set_block(1, 2, 3, 5)
    assert chunk.get_block(1, 2, 3) == 5
    assert chunk.block_count == 1
    assert chunk.dirty
    chunk.set_block(1, 2, 3, 7)
    assert chunk.block_count == 1
    chunk.set_block(1, 2, 3, 0)
    assert chunk.block_count == 0
    assert chunk.is_empty


def test_setting_same_block_keeps_clean():
    chunk = Chunk(ChunkCoord(0, 0))
    chunk.set_block(0, 0, 0, 4)
    chunk.dirty = False
    chunk.set_block(0, 0, 0, 4)
    assert not chunk.dirty
    assert chunk.block_count == 1


def test_positions_are_distinct():
    chunk = Chunk(ChunkCoord(0, 0))
    chunk.set_block(15, 255, 15, 9)
    chunk.set_block(0, 0, 0, 8)
    assert chunk.get_block(15, 255, 15) == 9
    assert chunk.get_block(0, 0, 0) == 8
    assert chunk.get_block(15, 0, 15) == 0


@pytest.mark.parametrize("pos", [(-1, 0, 0), (16, 0, 0), (0, 256, 0), (0, -1, 0), (0, 0, 16)])
def test_out_of_range_positions(pos):
    chunk = Chunk(ChunkCoord(0, 0))
    assert not Chunk.is_valid_position(*pos)
    chunk.dirty = False
    chunk.set_block(*pos, 3)
    assert chunk.get_block(*pos) == 0
    assert chunk.block_count == 0
    assert not chunk.dirty


def test_fill_sets_every_block():
    chunk = Chunk(ChunkCoord(0, 0))
    chunk.fill(2)
    assert chunk.block_count == Chunk.VOLUME
    assert chunk.get_block(7, 100, 9) == 2
    chunk.set_block(7, 100, 9, 0)
    assert chunk.block_count == Chunk.VOLUME - 1
    chunk.fill(0)
    assert chunk.is_empty
    assert chunk.get_block(3, 3, 3) == 0


def test_block_id_must_fit_sixteen_bits():
    chunk = Chunk(ChunkCoord(0, 0))
    with pytest.raises(OverflowError):
        chunk.set_block(0, 0, 0, 1 << 16)