import pytest

from blockworld.blocks import (
    BlockFace,
    BlockRegistry,
    BlockType,
    DuplicateBlockError,
    get_registry,
)


@pytest.fixture
def registry():
    reg = BlockRegistry()
    reg.initialize()
    return reg


def test_new_registry_holds_only_air():
    reg = BlockRegistry()
    assert len(reg) == 1
    assert reg.get(0).name == "air"
    assert reg.id_of("air") == 0
    assert "air" in reg


def test_initialize_registers_defaults_in_order(registry):
    assert registry.id_of("stone") == 1
    assert registry.id_of("dirt") == registry.id_of("stone") + 1
    assert registry.id_of("lava") == len(registry) - 1
    names = [registry.get(i).name for i in range(len(registry))]
    assert len(set(names)) == len(names)


def test_default_block_properties(registry):
    stone = registry.get_by_name("stone")
    assert stone.hardness == 2.0
    assert stone.is_solid and stone.is_opaque and not stone.is_transparent
    lava = registry.get_by_name("lava")
    assert lava.light_emission == 15
    assert not lava.is_solid
    water = registry.get_by_name("water")
    assert water.is_transparent and not water.is_opaque


def test_grass_face_textures(registry):
    grass = registry.get_by_name("grass")
    assert grass.texture_for(BlockFace.TOP) == "grass_top"
    assert grass.texture_for(BlockFace.BOTTOM) == "dirt"
    assert grass.texture_for(BlockFace.LEFT) == "grass_side"


def test_per_face_textures(registry):
    cactus = registry.get_by_name("cactus")
    assert cactus.texture_for(BlockFace.TOP) == "cactus_top"
    assert cactus.texture_for(BlockFace.BOTTOM) == "cactus_bottom"
    assert cactus.texture_for(BlockFace.FRONT) == "cactus_side"
    snowy = registry.get_by_name("snow_grass")
    assert snowy.texture_for(BlockFace.TOP) == "snow"


def test_texture_falls_back_to_first_face():
    block = BlockType(name="x").with_textures(("base", "", "", "", "", ""))
    assert block.texture_for(BlockFace.TOP) == "base"
    assert block.texture_for(BlockFace.BACK) == "base"


def test_with_textures_keeps_existing_when_only_overrides():
    block = BlockType(name="x").with_textures("a").with_textures(top="b")
    assert block.texture_for(BlockFace.TOP) == "b"
    assert block.texture_for(BlockFace.FRONT) == "a"


def test_with_textures_rejects_bad_input():
    with pytest.raises(TypeError):
        BlockType(name="x").with_textures("a", sideways="b")
    with pytest.raises(ValueError):
        BlockType(name="x").with_textures(("a", "b"))


def test_register_assigns_next_id(registry):
    count = len(registry)
    new_id = registry.register(BlockType(name="marble"))
    assert new_id == registry.id_of("lava") + 1
    assert registry.get(new_id).name == "marble"
    assert len(registry) == count + 1


def test_register_with_explicit_id(registry):
    assert registry.register(BlockType(name="custom", id=500)) == 500
    assert 500 in registry
    assert registry.get_by_name("custom").id == 500


def test_register_duplicate_name_raises(registry):
    with pytest.raises(DuplicateBlockError) as info:
        registry.register(BlockType(name="stone"))
    assert info.value.existing_id == registry.id_of("stone")


def test_register_duplicate_id_raises(registry):
    with pytest.raises(DuplicateBlockError):
        registry.register(BlockType(name="other", id=registry.id_of("dirt")))


def test_register_empty_name_raises(registry):
    with pytest.raises(ValueError):
        registry.register(BlockType())


def test_unknown_lookups(registry):
    assert registry.get(9999).name == "air"
    assert registry.get_by_name("nothing") is None
    assert registry.id_of("nothing") == 0
    assert "nothing" not in registry
    assert 9999 not in registry
    assert 1.5 not in registry


def test_clear_keeps_air_and_resets_ids(registry):
    registry.clear()
    assert len(registry) == 1
    assert "stone" not in registry
    assert registry.register(BlockType(name="stone")) == 1


def test_initialize_twice_is_stable(registry):
    before = len(registry)
    registry.initialize()
    assert len(registry) == before


def test_get_registry_is_shared():
    first = get_registry()
    second = get_registry()
    assert first is second
    assert second.get(0).name == "air"
    assert second.id_of("air") == 0
    assert "air" in first