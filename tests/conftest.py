"""In-memory fakes of the host contracts, plus fixtures that wire a small world.

The default world is a 128x128 tile map with three base locations:

    main     (1024, 1024)  start location, own command center
    enemy    (3072, 3072)  start location
    natural  (1024, 2560)

The main has up to eight mineral patches in a column west of the depot and
one geyser to the north-east.
"""

import itertools
from typing import Callable, List, Optional

import pytest
from sc2.position import Point2

from TalonBot.debug import DebugEngine
from TalonBot.economy import BaseManager
from TalonBot.construction import BuildManager
from TalonBot.errors import NoPathFound
from TalonBot.micro.micro_manager import MicroManager
from TalonBot.unit_types import UnitType


MAIN = (1024, 1024)
ENEMY_MAIN = (3072, 3072)
NATURAL = (1024, 2560)

GEYSER_POSITION = (1216, 864)


def mineral_position(i: int):
    return 800, 864 + 40 * i


# ── Fakes ─────────────────────────────────────────────────────────────────────


class FakePlayer:
    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return f"FakePlayer({self.name})"


_unit_ids = itertools.count(1)


class FakeUnit:
    """A unit snapshot that records the commands issued to it."""

    def __init__(self, unit_type: UnitType, x: int, y: int, player: FakePlayer,
                 tile=None, hit_points: Optional[int] = None, **flags):
        self.id = next(_unit_ids)
        self.type = unit_type
        self.x = x
        self.y = y
        self.player = player
        self._tile = tile
        self.hit_points = unit_type.max_hit_points if hit_points is None else hit_points
        self.ground_weapon_cooldown = flags.pop("ground_weapon_cooldown", 0)
        self.is_gathering_minerals = flags.pop("is_gathering_minerals", False)
        self.is_gathering_gas = flags.pop("is_gathering_gas", False)
        self.is_idle = flags.pop("is_idle", True)
        self.is_constructing = flags.pop("is_constructing", False)
        self.is_being_constructed = flags.pop("is_being_constructed", False)
        self.is_flyer = flags.pop("is_flyer", unit_type.is_flyer)
        assert not flags, f"unknown flags {flags}"
        self.orders: List[tuple] = []

    @property
    def tile_position(self) -> Point2:
        if self._tile is not None:
            return Point2(self._tile)
        return Point2((self.x // 32, self.y // 32))

    def move(self, position):
        self.orders.append(("move", position))

    def gather(self, target):
        self.orders.append(("gather", target))

    def build(self, unit_type, tile):
        self.orders.append(("build", unit_type, tile))

    def attack(self, target):
        self.orders.append(("attack", target))

    @property
    def last_order(self):
        return self.orders[-1] if self.orders else None

    def __repr__(self):
        return f"FakeUnit({self.id} {self.type.name} @ ({self.x}, {self.y}))"


class FakeGame:
    def __init__(self, map_width: int = 128, map_height: int = 128):
        self.self_player = FakePlayer("self")
        self.neutral_player = FakePlayer("neutral")
        self.enemy_player = FakePlayer("enemy")
        self.frame_count = 0
        self.map_width = map_width
        self.map_height = map_height
        self.units: List[FakeUnit] = []
        self.texts: List[str] = []
        self.buildable: Callable[[int, int], bool] = lambda tx, ty: True

    def add_unit(self, unit_type: UnitType, x: int, y: int, owner: str = "self", **kwargs) -> FakeUnit:
        player = {
            "self": self.self_player,
            "enemy": self.enemy_player,
            "neutral": self.neutral_player,
        }[owner]
        unit = FakeUnit(unit_type, x, y, player, **kwargs)
        self.units.append(unit)
        return unit

    def remove_unit(self, unit: FakeUnit) -> None:
        self.units.remove(unit)

    def get_all_units(self):
        return list(self.units)

    def get_enemy_units(self):
        return [u for u in self.units if u.player is self.enemy_player]

    def get_neutral_units(self):
        return [u for u in self.units if u.player is self.neutral_player]

    def is_buildable(self, tx, ty, check_buildings=False):
        return self.buildable(tx, ty)

    def send_text(self, message):
        self.texts.append(message)


class FakeBaseLocation:
    def __init__(self, x: int, y: int, is_start_location: bool = False):
        self.position = Point2((x, y))
        self.tile_position = Point2((x // 32, y // 32))
        self.is_start_location = is_start_location


class FakeTerrain:
    def __init__(self, locations, unreachable=()):
        self.locations = list(locations)
        # Tiles that ground units cannot reach
        self.unreachable = {Point2(t) for t in unreachable}

    def get_base_locations(self):
        return self.locations

    def is_connected(self, tile_a, tile_b):
        return Point2(tile_a) not in self.unreachable and Point2(tile_b) not in self.unreachable


class FakePathFinder:
    """Straight-line paths: one waypoint halfway, then the destination."""

    def __init__(self):
        self.calls = []
        self.blocked = False

    def find_path(self, source, destination, is_flyer=False):
        self.calls.append((source, destination, is_flyer))
        if self.blocked:
            raise NoPathFound(source, destination)
        midpoint = Point2(((source.x + destination.x) / 2, (source.y + destination.y) / 2))
        return [midpoint, destination]


class FakeOverlay:
    def __init__(self):
        self.calls = []

    def draw_text_map(self, x, y, text):
        self.calls.append(("text_map", x, y, text))

    def draw_text_screen(self, x, y, text):
        self.calls.append(("text_screen", x, y, text))

    def draw_circle_map(self, x, y, radius, color, filled=False):
        self.calls.append(("circle", x, y, radius, color, filled))

    def draw_box_map(self, left, top, right, bottom, color, filled=False):
        self.calls.append(("box", left, top, right, bottom, color, filled))

    def draw_line_map(self, x1, y1, x2, y2, color):
        self.calls.append(("line", x1, y1, x2, y2, color))


# ── World ─────────────────────────────────────────────────────────────────────


class World:
    """A game, its terrain and the managers built over them."""

    def __init__(self, minerals: int = 8, geysers: int = 1, depot: bool = True,
                 enemy_depot: bool = False, unreachable=()):
        self.game = FakeGame()
        self.locations = [
            FakeBaseLocation(*MAIN, is_start_location=True),
            FakeBaseLocation(*ENEMY_MAIN, is_start_location=True),
            FakeBaseLocation(*NATURAL),
        ]
        self.terrain = FakeTerrain(self.locations, unreachable)
        self.path_finder = FakePathFinder()
        self.overlay = FakeOverlay()

        self.minerals = [
            self.game.add_unit(UnitType.RESOURCE_MINERAL_FIELD, *mineral_position(i), owner="neutral")
            for i in range(minerals)
        ]
        self.geysers = [
            self.game.add_unit(UnitType.RESOURCE_VESPENE_GEYSER, *GEYSER_POSITION, owner="neutral")
            for _ in range(geysers)
        ]

        self.debug_engine = DebugEngine(self.overlay)
        self.base_manager = BaseManager(self.game, self.terrain, self.debug_engine)
        self.build_manager = BuildManager(self.game, self.base_manager, self.debug_engine)
        self.micro_manager = MicroManager(
            self.game, self.terrain, self.path_finder, self.base_manager, self.debug_engine,
        )

        self.depot = None
        if depot:
            self.depot = self.game.add_unit(UnitType.TERRAN_COMMAND_CENTER, *MAIN)
            self.base_manager.resource_depot_shown(self.depot)
        if enemy_depot:
            hatchery = self.game.add_unit(UnitType.ZERG_HATCHERY, *ENEMY_MAIN, owner="enemy")
            self.base_manager.resource_depot_shown(hatchery)

    @property
    def main(self):
        return self.base_manager.bases[0]

    def add_worker(self, x: int = 1024, y: int = 1100, register: bool = True):
        """A finished SCV, attached to the closest base and known to the micro manager."""
        unit = self.game.add_unit(UnitType.TERRAN_SCV, x, y)
        worker = self.base_manager.worker_complete(unit)
        if register:
            worker = self.micro_manager.unit_created(unit)
        return worker

    def all_workers(self):
        return [w for base in self.base_manager for w in base.workers.values()]

    def all_resources(self):
        for base in self.base_manager:
            yield from base.minerals.values()
            yield from base.gas.values()


def assert_gatherers_consistent(world: World) -> None:
    """Every resource counts exactly the workers that point at it."""
    workers = list(world.all_workers())
    workers += [a for a in world.micro_manager.unit_agents.values() if a not in workers]
    for resource in world.all_resources():
        pointing = [w for w in workers if getattr(w, "current_resource", None) is resource]
        assert resource.get_num_gatherers() == len(pointing), resource


@pytest.fixture
def game():
    return FakeGame()


@pytest.fixture
def make_world():
    return World


@pytest.fixture
def world():
    return World()


@pytest.fixture
def check_gatherers():
    return assert_gatherers_consistent
