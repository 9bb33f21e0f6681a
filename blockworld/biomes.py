"""Biome kinds, their definitions, and climate-based biome selection."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from blockworld.blocks import BlockRegistry, get_registry

logger = logging.getLogger(__name__)

MOUNTAIN_ELEVATION = 0.65
FALLBACK_MOUNTAIN_ELEVATION = 0.7


class BiomeType(enum.IntEnum):
    """Kinds of biome; the value is the index of the biome's definition."""

    PLAINS = 0
    DESERT = 1
    SNOW = 2
    JUNGLE = 3
    MOUNTAINS = 4


class BiomeFeature(enum.Enum):
    """Decorations a biome may place on its surface."""

    FLOWERS = enum.auto()
    TALL_GRASS = enum.auto()
    CACTUS = enum.auto()
    VINES = enum.auto()


@dataclass(frozen=True)
class ValueRange:
    """Closed interval ``[min, max]``."""

    min: float
    max: float

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, (int, float)):
            return False
        return self.min <= value <= self.max


@dataclass(frozen=True)
class BiomeDefinition:
    """Terrain shape, block palette, climate and decoration of one biome."""

    biome: BiomeType
    name: str
    base_height: int
    height_variation: int
    surface_block: int
    subsurface_block: int
    underground_block: int
    temperature_range: ValueRange
    humidity_range: ValueRange
    tree_chance: float
    grass_chance: float
    special_features: tuple[BiomeFeature, ...]


_NAMES = {
    BiomeType.PLAINS: "Plains",
    BiomeType.DESERT: "Desert",
    BiomeType.SNOW: "Snow",
    BiomeType.JUNGLE: "Jungle",
    BiomeType.MOUNTAINS: "Mountains",
}


def _build_definition(biome: BiomeType, registry: BlockRegistry) -> BiomeDefinition:
    ids = registry.id_of
    grass, dirt, stone = ids("grass"), ids("dirt"), ids("stone")
    if biome is BiomeType.PLAINS:
        return BiomeDefinition(
            biome, "Plains", 64, 8, grass, dirt, stone,
            ValueRange(0.5, 0.8), ValueRange(0.4, 0.7), 0.05, 0.6,
            (BiomeFeature.FLOWERS, BiomeFeature.TALL_GRASS),
        )
    if biome is BiomeType.DESERT:
        sand = ids("sand")
        return BiomeDefinition(
            biome, "Desert", 64, 4, sand, sand, ids("sandstone"),
            ValueRange(0.8, 1.0), ValueRange(0.0, 0.2), 0.0, 0.05,
            (BiomeFeature.CACTUS,),
        )
    if biome is BiomeType.SNOW:
        return BiomeDefinition(
            biome, "Snow", 64, 6, ids("snow_grass"), dirt, stone,
            ValueRange(0.0, 0.3), ValueRange(0.3, 0.6), 0.02, 0.2,
            (BiomeFeature.TALL_GRASS,),
        )
    if biome is BiomeType.JUNGLE:
        return BiomeDefinition(
            biome, "Jungle", 64, 10, grass, dirt, stone,
            ValueRange(0.8, 1.0), ValueRange(0.7, 1.0), 0.15, 0.8,
            (BiomeFeature.TALL_GRASS, BiomeFeature.VINES),
        )
    return BiomeDefinition(
        BiomeType.MOUNTAINS, "Mountains", 80, 40, stone, stone, stone,
        ValueRange(0.2, 0.6), ValueRange(0.3, 0.7), 0.01, 0.1,
        (BiomeFeature.FLOWERS,),
    )


def biome_definition(biome: BiomeType | int, registry: BlockRegistry | None = None) -> BiomeDefinition:
    """Definition of a biome, with block ids taken from ``registry``.

    An unknown biome falls back to the plains definition.
    """
    if registry is None:
        registry = get_registry()
    try:
        kind = BiomeType(biome)
    except ValueError:
        logger.warning("Requested invalid biome definition index: %s", biome)
        kind = BiomeType.PLAINS
    return _build_definition(kind, registry)


def biome_name(biome: BiomeType | int) -> str:
    """Display name of a biome, or ``"Unknown"``."""
    try:
        return _NAMES[BiomeType(biome)]
    except ValueError:
        logger.warning("Requested name for unknown biome type")
        return "Unknown"


_SELECTION_ORDER = (
    BiomeType.MOUNTAINS,
    BiomeType.SNOW,
    BiomeType.DESERT,
    BiomeType.JUNGLE,
    BiomeType.PLAINS,
)


def _to_unit(value: float) -> float:
    return min(max((value + 1.0) * 0.5, 0.0), 1.0)


def select_biome(
    temperature: float,
    humidity: float,
    elevation: float,
    registry: BlockRegistry | None = None,
) -> BiomeType:
    """Pick a biome from temperature and humidity in [-1, 1] and elevation in [0, 1]."""
    temp01 = _to_unit(temperature)
    humidity01 = _to_unit(humidity)

    for biome in _SELECTION_ORDER:
        definition = biome_definition(biome, registry)
        if temp01 not in definition.temperature_range or humidity01 not in definition.humidity_range:
            continue
        if biome is BiomeType.MOUNTAINS and elevation < MOUNTAIN_ELEVATION:
            continue
        return biome

    if elevation >= FALLBACK_MOUNTAIN_ELEVATION:
        return BiomeType.MOUNTAINS
    if temp01 <= 0.25:
        return BiomeType.SNOW
    if temp01 >= 0.75 and humidity01 <= 0.35:
        return BiomeType.DESERT
    if temp01 >= 0.75 and humidity01 >= 0.65:
        return BiomeType.JUNGLE
    return BiomeType.PLAINS