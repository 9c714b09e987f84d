"""
Unit type table and unit-kind classification.

The host reports every unit with a ``UnitType``. Static facts the bot needs
about a type (footprint in build tiles, building/worker/flyer flags, weapon
ranges in pixels) live in UNIT_DATA and are reachable as properties on the
enum member:

    UnitType.TERRAN_BARRACKS.tile_width     # 4
    UnitType.TERRAN_WRAITH.is_flyer         # True
    UnitType.PROTOSS_PHOTON_CANNON.air_range  # 224

unit_kind() is the single place that turns a type into the coarse kind the
managers dispatch on (worker, mineral field, geyser, refinery, depot, other).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class UnitType(Enum):
    # Terran units
    TERRAN_SCV = "Terran_SCV"
    TERRAN_MARINE = "Terran_Marine"
    TERRAN_MEDIC = "Terran_Medic"
    TERRAN_VULTURE = "Terran_Vulture"
    TERRAN_SIEGE_TANK = "Terran_Siege_Tank_Tank_Mode"
    TERRAN_WRAITH = "Terran_Wraith"
    # Terran buildings
    TERRAN_COMMAND_CENTER = "Terran_Command_Center"
    TERRAN_SUPPLY_DEPOT = "Terran_Supply_Depot"
    TERRAN_REFINERY = "Terran_Refinery"
    TERRAN_BARRACKS = "Terran_Barracks"
    TERRAN_ENGINEERING_BAY = "Terran_Engineering_Bay"
    TERRAN_BUNKER = "Terran_Bunker"
    TERRAN_ACADEMY = "Terran_Academy"
    TERRAN_MISSILE_TURRET = "Terran_Missile_Turret"
    TERRAN_FACTORY = "Terran_Factory"
    TERRAN_MACHINE_SHOP = "Terran_Machine_Shop"
    TERRAN_STARPORT = "Terran_Starport"
    TERRAN_CONTROL_TOWER = "Terran_Control_Tower"
    TERRAN_ARMORY = "Terran_Armory"
    TERRAN_SCIENCE_FACILITY = "Terran_Science_Facility"
    TERRAN_COMSAT_STATION = "Terran_Comsat_Station"
    # Neutral resources
    RESOURCE_MINERAL_FIELD = "Resource_Mineral_Field"
    RESOURCE_MINERAL_FIELD_TYPE_2 = "Resource_Mineral_Field_Type_2"
    RESOURCE_MINERAL_FIELD_TYPE_3 = "Resource_Mineral_Field_Type_3"
    RESOURCE_VESPENE_GEYSER = "Resource_Vespene_Geyser"
    # Enemy types the bot reasons about
    PROTOSS_PROBE = "Protoss_Probe"
    PROTOSS_ZEALOT = "Protoss_Zealot"
    PROTOSS_DRAGOON = "Protoss_Dragoon"
    PROTOSS_NEXUS = "Protoss_Nexus"
    PROTOSS_ASSIMILATOR = "Protoss_Assimilator"
    PROTOSS_PHOTON_CANNON = "Protoss_Photon_Cannon"
    ZERG_DRONE = "Zerg_Drone"
    ZERG_ZERGLING = "Zerg_Zergling"
    ZERG_HYDRALISK = "Zerg_Hydralisk"
    ZERG_MUTALISK = "Zerg_Mutalisk"
    ZERG_HATCHERY = "Zerg_Hatchery"
    ZERG_EXTRACTOR = "Zerg_Extractor"
    ZERG_SUNKEN_COLONY = "Zerg_Sunken_Colony"
    ZERG_SPORE_COLONY = "Zerg_Spore_Colony"

    # ── Table lookups ─────────────────────────────────────────────────────

    @property
    def data(self) -> "UnitTypeData":
        return UNIT_DATA[self]

    @property
    def tile_width(self) -> int:
        return UNIT_DATA[self].tile_width

    @property
    def tile_height(self) -> int:
        return UNIT_DATA[self].tile_height

    @property
    def is_building(self) -> bool:
        return UNIT_DATA[self].is_building

    @property
    def is_worker(self) -> bool:
        return UNIT_DATA[self].is_worker

    @property
    def is_flyer(self) -> bool:
        return UNIT_DATA[self].is_flyer

    @property
    def is_refinery(self) -> bool:
        return self in REFINERY_TYPES

    @property
    def is_resource_depot(self) -> bool:
        return self in RESOURCE_DEPOT_TYPES

    @property
    def is_mineral_field(self) -> bool:
        return self in MINERAL_FIELD_TYPES

    @property
    def ground_range(self) -> int:
        return UNIT_DATA[self].ground_range

    @property
    def air_range(self) -> int:
        return UNIT_DATA[self].air_range

    @property
    def ground_cooldown(self) -> int:
        return UNIT_DATA[self].ground_cooldown

    @property
    def max_hit_points(self) -> int:
        return UNIT_DATA[self].max_hit_points


@dataclass(frozen=True)
class UnitTypeData:
    """
    Static facts about one unit type.

    Weapon ranges are in pixels (32 per build tile); a range of 0 means the
    type has no weapon against that target class. ground_cooldown is the
    weapon's full cooldown in frames.
    """
    tile_width: int = 1
    tile_height: int = 1
    is_building: bool = False
    is_worker: bool = False
    is_flyer: bool = False
    ground_range: int = 0
    air_range: int = 0
    ground_cooldown: int = 0
    max_hit_points: int = 0


def _building(width: int, height: int, hp: int, ground_range: int = 0,
              air_range: int = 0, cooldown: int = 0) -> UnitTypeData:
    return UnitTypeData(
        tile_width=width,
        tile_height=height,
        is_building=True,
        ground_range=ground_range,
        air_range=air_range,
        ground_cooldown=cooldown,
        max_hit_points=hp,
    )


UNIT_DATA: dict[UnitType, UnitTypeData] = {
    UnitType.TERRAN_SCV: UnitTypeData(is_worker=True, ground_range=10, ground_cooldown=15, max_hit_points=60),
    UnitType.TERRAN_MARINE: UnitTypeData(ground_range=128, air_range=128, ground_cooldown=15, max_hit_points=40),
    UnitType.TERRAN_MEDIC: UnitTypeData(max_hit_points=60),
    UnitType.TERRAN_VULTURE: UnitTypeData(ground_range=160, ground_cooldown=30, max_hit_points=80),
    UnitType.TERRAN_SIEGE_TANK: UnitTypeData(ground_range=224, ground_cooldown=37, max_hit_points=150),
    UnitType.TERRAN_WRAITH: UnitTypeData(is_flyer=True, ground_range=160, air_range=160,
                                         ground_cooldown=30, max_hit_points=120),

    UnitType.TERRAN_COMMAND_CENTER: _building(4, 3, 1500),
    UnitType.TERRAN_SUPPLY_DEPOT: _building(3, 2, 500),
    UnitType.TERRAN_REFINERY: _building(4, 2, 750),
    UnitType.TERRAN_BARRACKS: _building(4, 3, 1000),
    UnitType.TERRAN_ENGINEERING_BAY: _building(4, 3, 850),
    UnitType.TERRAN_BUNKER: _building(3, 2, 350),
    UnitType.TERRAN_ACADEMY: _building(3, 2, 600),
    UnitType.TERRAN_MISSILE_TURRET: _building(2, 2, 200, air_range=224, cooldown=15),
    UnitType.TERRAN_FACTORY: _building(4, 3, 1250),
    UnitType.TERRAN_MACHINE_SHOP: _building(2, 2, 750),
    UnitType.TERRAN_STARPORT: _building(4, 3, 1300),
    UnitType.TERRAN_CONTROL_TOWER: _building(2, 2, 500),
    UnitType.TERRAN_ARMORY: _building(3, 2, 750),
    UnitType.TERRAN_SCIENCE_FACILITY: _building(4, 3, 850),
    UnitType.TERRAN_COMSAT_STATION: _building(2, 2, 500),

    UnitType.RESOURCE_MINERAL_FIELD: UnitTypeData(tile_width=2),
    UnitType.RESOURCE_MINERAL_FIELD_TYPE_2: UnitTypeData(tile_width=2),
    UnitType.RESOURCE_MINERAL_FIELD_TYPE_3: UnitTypeData(tile_width=2),
    UnitType.RESOURCE_VESPENE_GEYSER: UnitTypeData(tile_width=4, tile_height=2),

    UnitType.PROTOSS_PROBE: UnitTypeData(is_worker=True, ground_range=10, ground_cooldown=22, max_hit_points=40),
    UnitType.PROTOSS_ZEALOT: UnitTypeData(ground_range=15, ground_cooldown=22, max_hit_points=100),
    UnitType.PROTOSS_DRAGOON: UnitTypeData(ground_range=128, air_range=128, ground_cooldown=30, max_hit_points=100),
    UnitType.PROTOSS_NEXUS: _building(4, 3, 750),
    UnitType.PROTOSS_ASSIMILATOR: _building(4, 2, 450),
    UnitType.PROTOSS_PHOTON_CANNON: _building(2, 2, 100, ground_range=224, air_range=224, cooldown=22),
    UnitType.ZERG_DRONE: UnitTypeData(is_worker=True, ground_range=32, ground_cooldown=22, max_hit_points=40),
    UnitType.ZERG_ZERGLING: UnitTypeData(ground_range=15, ground_cooldown=8, max_hit_points=35),
    UnitType.ZERG_HYDRALISK: UnitTypeData(ground_range=128, air_range=128, ground_cooldown=15, max_hit_points=80),
    UnitType.ZERG_MUTALISK: UnitTypeData(is_flyer=True, ground_range=96, air_range=96,
                                         ground_cooldown=30, max_hit_points=120),
    UnitType.ZERG_HATCHERY: _building(4, 3, 1250),
    UnitType.ZERG_EXTRACTOR: _building(4, 2, 750),
    UnitType.ZERG_SUNKEN_COLONY: _building(2, 2, 300, ground_range=224, cooldown=32),
    UnitType.ZERG_SPORE_COLONY: _building(2, 2, 400, air_range=224, cooldown=15),
}

MINERAL_FIELD_TYPES: frozenset = frozenset({
    UnitType.RESOURCE_MINERAL_FIELD,
    UnitType.RESOURCE_MINERAL_FIELD_TYPE_2,
    UnitType.RESOURCE_MINERAL_FIELD_TYPE_3,
})

REFINERY_TYPES: frozenset = frozenset({
    UnitType.TERRAN_REFINERY,
    UnitType.PROTOSS_ASSIMILATOR,
    UnitType.ZERG_EXTRACTOR,
})

RESOURCE_DEPOT_TYPES: frozenset = frozenset({
    UnitType.TERRAN_COMMAND_CENTER,
    UnitType.PROTOSS_NEXUS,
    UnitType.ZERG_HATCHERY,
})

STATIC_DEFENSE_TYPES: frozenset = frozenset({
    UnitType.PROTOSS_PHOTON_CANNON,
    UnitType.ZERG_SUNKEN_COLONY,
    UnitType.ZERG_SPORE_COLONY,
})


class UnitKind(Enum):
    WORKER = auto()
    MINERAL_FIELD = auto()
    GEYSER = auto()
    REFINERY = auto()
    RESOURCE_DEPOT = auto()
    OTHER = auto()


def unit_kind(unit_type: UnitType) -> UnitKind:
    """Classify a unit type for event dispatch."""
    if unit_type.is_worker:
        return UnitKind.WORKER
    if unit_type.is_mineral_field:
        return UnitKind.MINERAL_FIELD
    if unit_type == UnitType.RESOURCE_VESPENE_GEYSER:
        return UnitKind.GEYSER
    if unit_type.is_refinery:
        return UnitKind.REFINERY
    if unit_type.is_resource_depot:
        return UnitKind.RESOURCE_DEPOT
    return UnitKind.OTHER
