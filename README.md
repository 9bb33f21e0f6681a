# blockworld

The data model and algorithms of a block-based voxel world, in plain Python.
It needs nothing outside the standard library.

| Module | Contents |
| --- | --- |
| `blockworld.blocks` | `BlockFace`, `BlockType`, `BlockRegistry`, `DuplicateBlockError`, `get_registry()` |
| `blockworld.chunk` | `ChunkCoord` and `Chunk`, a 16×256×16 column of block ids |
| `blockworld.biomes` | `BiomeType`, `BiomeFeature`, `ValueRange`, `BiomeDefinition`, `biome_definition()`, `biome_name()`, `select_biome()` |
| `blockworld.structures` | `StructureType` and `StructureGenerator`, which places trees, cacti, tall grass and flowers |
| `blockworld.frustum` | `Plane`, `AABB`, `PlaneIndex`, `Frustum` for view-frustum culling |
| `blockworld.mesh` | `MeshFaceDirection`, `AtlasRegion`, `BlockVertex`, `ChunkMesh` and face helpers |
| `blockworld.chunk_manager` | `ChunkManager`, which streams chunks around a camera |
| `blockworld.events` | `EventCategory` flags and keyboard, mouse and gamepad event classes |

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Blocks and chunks

A `BlockRegistry` always holds air at id 0. `initialize()` resets it and then
registers the default block set: stone, dirt, grass, sand, water, snow, ice, logs,
leaves, ores, lava and others. `register()` gives a block with id 0 the next free id.
It raises `ValueError` for an empty name. It raises `DuplicateBlockError` for a name
or id that is already taken; the error's `existing_id` holds the id in use.
`get()` returns air for an unknown id. `id_of()` returns 0 for an unknown name.
`get_by_name()` returns `None` for an unknown name. `get_registry()` returns one
shared registry for the whole process. That registry starts with only air until you
call `initialize()` on it.

```python
from blockworld.blocks import BlockFace, BlockRegistry, BlockType
from blockworld.chunk import Chunk, ChunkCoord

registry = BlockRegistry()
registry.initialize()

grass = registry.get_by_name("grass")
print(grass.texture_for(BlockFace.TOP))      # grass_top
print("stone" in registry, len(registry))

glass_id = registry.register(BlockType(name="glass", is_opaque=False, is_transparent=True).with_textures("glass"))

coord = ChunkCoord.from_world_pos(40.0, -3.0)
print(coord)                                 # Chunk(2, -1)

chunk = Chunk(coord)
chunk.set_block(0, 64, 0, registry.id_of("stone"))
print(chunk.get_block(0, 64, 0), chunk.block_count, chunk.is_empty)
```

`Chunk.get_block` reads positions outside the chunk as air (0). `Chunk.set_block`
ignores them. Any change sets `chunk.dirty`.

## Biomes

`select_biome(temperature, humidity, elevation, registry)` takes temperature and
humidity in [-1, 1] and elevation in [0, 1]. It returns a `BiomeType`.
`biome_definition(biome, registry)` gives the biome's heights, climate ranges,
tree and grass chances and features. Its block ids are looked up in the registry,
so they are 0 for names the registry does not hold.

```python
from blockworld.biomes import biome_definition, biome_name, select_biome

biome = select_biome(0.9, -0.9, 0.3, registry)
print(biome_name(biome))                     # Desert
print(biome_definition(biome, registry).surface_block == registry.id_of("sand"))  # True
```

## Structures

`StructureGenerator(seed, registry)` places structures on a ground block at a local
position. Heights and shapes come from `random_in_range`, which depends only on the
seed and the position, so the same seed always gives the same result. A tree needs
grass, dirt or snow grass below it and clear air above. A cactus needs sand. Tall
grass and flowers need grass, snow grass or dirt below them.

```python
from blockworld.biomes import BiomeType
from blockworld.structures import StructureGenerator

grass_id = registry.id_of("grass")
for x in range(16):
    for z in range(16):
        chunk.set_block(x, 64, z, grass_id)

structures = StructureGenerator(12345, registry)
structures.place_tree(chunk, 8, 64, 8, BiomeType.PLAINS)     # oak tree
print(chunk.get_block(8, 65, 8) == registry.id_of("oak_log"))  # True
```

## Frustum culling

`Frustum` takes a 4×4 view-projection matrix as four rows of four numbers. It
extracts six normalized planes from the matrix.

```python
from blockworld.frustum import AABB, Frustum, PlaneIndex

identity = [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]]
frustum = Frustum(identity)                  # the cube [-1, 1]^3
print(frustum.contains_point((0.5, 0.0, 0.0)))            # True
print(frustum.contains_point((2.0, 0.0, 0.0)))            # False
print(frustum.contains_aabb(AABB((0, 0, 0), (16, 256, 16))))  # True
print(frustum.plane(PlaneIndex.LEFT))
```

## Meshing

`ChunkMesh.generate(chunk, chunk_lookup, atlas)` merges visible faces into quads.
Each quad has four `BlockVertex` values and six indices. `chunk_lookup` is a
callable that returns the loaded chunk at a `ChunkCoord`, or `None`. It is used to
hide faces that touch neighbouring chunks. `atlas` maps texture names to
`AtlasRegion` rectangles. A face whose texture is missing from the atlas gets the
UVs (0,0)–(1,1).

```python
from blockworld.mesh import AtlasRegion, ChunkMesh

atlas = {"grass_top": AtlasRegion(0.0, 0.0, 0.25, 0.25)}
mesh = ChunkMesh(chunk.position, registry)
mesh.generate(chunk, {chunk.position: chunk}.get, atlas)
print(mesh.vertex_count, mesh.index_count, mesh.is_empty)
```

## Chunk streaming

`ChunkManager(generator, registry, generate_per_frame, mesh_per_frame, unload_margin)`
takes a generator, which is any callable that fills a new `Chunk` for its
`ChunkCoord`. Without a generator, chunks stay empty. Each call to
`update(camera_position, render_distance)` does the following:

- queues missing chunks within the render distance;
- generates at most `generate_per_frame` of them;
- meshes at most `mesh_per_frame` queued chunks;
- unloads chunks farther than `render_distance + unload_margin`.

Meshing is skipped until an atlas is set with `set_texture_atlas`.

```python
from blockworld.chunk_manager import ChunkManager

stone_id = registry.id_of("stone")

def flat(chunk, coord):
    for y in range(4):
        for x in range(16):
            for z in range(16):
                chunk.set_block(x, y, z, stone_id)

manager = ChunkManager(flat, registry, 1, 2, 2)
manager.set_texture_atlas(atlas)
manager.update((0.0, 70.0, 0.0), 4)
print(len(manager), "chunk(s) loaded")       # 1 after the first frame
print(manager.get_mesh(manager.chunks_in_radius(manager.chunks and next(iter(manager.chunks)), 0)[0]))
manager.shutdown()
```

## Input events

The event classes are frozen dataclasses. Each has an `event_type` and
`EventCategory` flags. `KeyEvent` and `MouseButtonEvent` are base classes and
cannot be created directly.

```python
from blockworld.events import EventCategory, KeyPressEvent, MouseScrollEvent

event = KeyPressEvent(key_code=65, repeat=False)
print(event)                                  # KeyPressEvent: Key=65, Repeat=false
print(event.in_category(EventCategory.KEYBOARD))  # True
print(MouseScrollEvent(0.0, 1.5))             # MouseScrollEvent: (0, 1.5)
```

## What this package does not do

- It has no noise-based terrain or climate generation. You supply the chunk generator,
  and the temperature, humidity and elevation values for `select_biome`.
- It does not render. Meshes are plain lists of vertices and indices, and nothing is
  uploaded to a GPU.
- It loads no textures and builds no texture atlas. The atlas is a mapping you provide.
- It opens no window and polls no keyboard, mouse or gamepad. The event classes only
  describe input.
- It does not save or load worlds.