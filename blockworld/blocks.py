"""Block types and the registry that maps block names to numeric ids."""

from __future__ import annotations

import enum
import functools
import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

AIR_ID = 0
_FACE_COUNT = 6


class BlockFace(enum.IntEnum):
    """The six faces of a block; the value is the index into its texture list."""

    FRONT = 0
    BACK = 1
    LEFT = 2
    RIGHT = 3
    TOP = 4
    BOTTOM = 5


class DuplicateBlockError(ValueError):
    """Raised when a block name or id is registered twice."""

    def __init__(self, message: str, existing_id: int) -> None:
        super().__init__(message)
        self.existing_id = existing_id


@dataclass(frozen=True)
class BlockType:
    """Immutable description of one kind of block."""

    name: str = ""
    id: int = 0
    is_solid: bool = True
    is_opaque: bool = True
    is_transparent: bool = False
    textures: tuple[str, ...] = ("",) * _FACE_COUNT
    light_emission: int = 0
    hardness: float = 1.0

    def texture_for(self, face: BlockFace) -> str:
        """Texture name for a face, falling back to the first face's texture."""
        texture = self.textures[BlockFace(face)]
        return texture if texture else self.textures[0]

    def with_textures(self, all_faces: str | Sequence[str] | None = None, **kwargs: str) -> BlockType:
        """Return a copy with new textures.

        ``all_faces`` is either one name for every face or a sequence of six
        names in face order. Keyword arguments named after faces (``top``,
        ``bottom`` ...) override single faces afterwards.
        """
        if all_faces is None:
            textures = list(self.textures)
        elif isinstance(all_faces, str):
            textures = [all_faces] * _FACE_COUNT
        else:
            textures = list(all_faces)
            if len(textures) != _FACE_COUNT:
                raise ValueError(f"expected {_FACE_COUNT} face textures, got {len(textures)}")
        for face_name, texture in kwargs.items():
            try:
                face = BlockFace[face_name.upper()]
            except KeyError:
                raise TypeError(f"unknown block face {face_name!r}") from None
            textures[face] = texture
        return replace(self, textures=tuple(textures))


AIR = BlockType(
    name="air",
    id=AIR_ID,
    is_solid=False,
    is_opaque=False,
    is_transparent=True,
    hardness=0.0,
)


def _solid(name: str, hardness: float, **textures: str) -> BlockType:
    return BlockType(name=name, hardness=hardness).with_textures(name, **textures)


def _see_through(name: str, hardness: float, *, solid: bool, light: int = 0) -> BlockType:
    return BlockType(
        name=name,
        is_solid=solid,
        is_opaque=False,
        is_transparent=True,
        light_emission=light,
        hardness=hardness,
    ).with_textures(name)


def _log(prefix: str) -> BlockType:
    side, top = f"{prefix}_log_side", f"{prefix}_log_top"
    return BlockType(name=f"{prefix}_log", hardness=2.0).with_textures((side, side, side, side, top, top))


def _default_blocks() -> list[BlockType]:
    return [
        _solid("stone", 2.0),
        _solid("dirt", 1.0),
        BlockType(name="grass", hardness=1.5).with_textures("grass_side", top="grass_top", bottom="dirt"),
        _solid("sand", 0.5),
        _see_through("water", 100.0, solid=False),
        _solid("snow", 0.2),
        _see_through("ice", 0.5, solid=True),
        BlockType(name="snow_grass", hardness=1.5).with_textures(("grass_side_snowy",) * 4 + ("snow", "dirt")),
        _log("oak"),
        _see_through("oak_leaves", 0.2, solid=True),
        _log("jungle"),
        _see_through("jungle_leaves", 0.2, solid=True),
        _log("spruce"),
        _see_through("spruce_leaves", 0.2, solid=True),
        BlockType(name="cactus", hardness=0.4).with_textures(("cactus_side",) * 4 + ("cactus_top", "cactus_bottom")),
        _solid("sandstone", 0.8),
        _solid("bedrock", 1000.0),
        _solid("coal_ore", 3.0),
        _solid("iron_ore", 3.0),
        _solid("gold_ore", 3.0),
        _solid("diamond_ore", 3.0),
        _see_through("tall_grass", 0.0, solid=False),
        _see_through("flower", 0.0, solid=False),
        _see_through("vines", 0.2, solid=False),
        _see_through("lava", 100.0, solid=False, light=15),
    ]


class BlockRegistry:
    """Thread-safe mapping between block ids, names and block types.

    Id 0 is always the air block.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._blocks: dict[int, BlockType] = {}
        self._name_to_id: dict[str, int] = {}
        self._next_id = 1
        self._reset()

    def _reset(self) -> None:
        self._blocks = {AIR_ID: AIR}
        self._name_to_id = {AIR.name: AIR_ID}
        self._next_id = 1

    def initialize(self) -> None:
        """Reset the registry and register the default block set."""
        with self._lock:
            logger.info("Initializing BlockRegistry with default blocks...")
            self._reset()
            for block in _default_blocks():
                self.register(block)

    def clear(self) -> None:
        """Remove every block except air."""
        with self._lock:
            logger.info("Clearing BlockRegistry...")
            self._reset()

    def register(self, block: BlockType) -> int:
        """Register a block and return its id.

        A block with id 0 is given the next free id.
        """
        with self._lock:
            if not block.name:
                raise ValueError("cannot register a block with an empty name")
            if block.name in self._name_to_id:
                existing = self._name_to_id[block.name]
                raise DuplicateBlockError(f"block with name {block.name!r} is already registered", existing)
            if block.id == 0:
                block = replace(block, id=self._next_id)
                self._next_id += 1
            elif block.id in self._blocks:
                raise DuplicateBlockError(f"block with id {block.id} is already registered", block.id)
            self._blocks[block.id] = block
            self._name_to_id[block.name] = block.id
            logger.info("Registered block %r (ID: %d)", block.name, block.id)
            return block.id

    def get(self, block_id: int) -> BlockType:
        """Block type for an id; unknown ids give air."""
        with self._lock:
            block = self._blocks.get(block_id)
        if block is None:
            logger.warning("Requested block ID %s not found. Returning AIR.", block_id)
            return AIR
        return block

    def get_by_name(self, name: str) -> BlockType | None:
        """Block type for a name, or None if it is not registered."""
        with self._lock:
            block_id = self._name_to_id.get(name)
            return None if block_id is None else self._blocks.get(block_id)

    def id_of(self, name: str) -> int:
        """Id for a name, or 0 (air) if it is not registered."""
        with self._lock:
            return self._name_to_id.get(name, AIR_ID)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            if isinstance(key, str):
                return key in self._name_to_id
            if isinstance(key, int):
                return key in self._blocks
            return False

    def __len__(self) -> int:
        with self._lock:
            return len(self._blocks)


@functools.lru_cache(maxsize=None)
def get_registry() -> BlockRegistry:
    """The process-wide shared registry."""
    return BlockRegistry()