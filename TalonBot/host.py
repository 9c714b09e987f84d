"""
Host contracts — what the bot expects from the game binding.

The decision core never imports a concrete game library. The glue layer
hands it objects that satisfy these protocols: a game handle polled every
frame, unit handles (snapshots valid for the current frame only), the
terrain analysis result, a path finder and a debug overlay.

All positions are pixels unless named *tile*; one build tile is 32 pixels.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Protocol

if TYPE_CHECKING:
    from sc2.position import Point2
    from TalonBot.unit_types import UnitType


class Player(Protocol):
    name: str


class Unit(Protocol):
    id: int
    x: int
    y: int
    tile_position: "Point2"
    type: "UnitType"
    player: Player
    hit_points: int
    ground_weapon_cooldown: int
    is_gathering_minerals: bool
    is_gathering_gas: bool
    is_idle: bool
    is_constructing: bool
    is_being_constructed: bool
    is_flyer: bool

    def move(self, position: "Point2") -> None: ...

    def gather(self, target: "Unit") -> None: ...

    def build(self, unit_type: "UnitType", tile: "Point2") -> None: ...

    def attack(self, target: "Unit") -> None: ...


class Game(Protocol):
    self_player: Player
    neutral_player: Player
    frame_count: int
    map_width: int
    map_height: int

    def get_all_units(self) -> Iterable[Unit]: ...

    def get_enemy_units(self) -> Iterable[Unit]: ...

    def get_neutral_units(self) -> Iterable[Unit]: ...

    def is_buildable(self, tx: int, ty: int, check_buildings: bool = False) -> bool: ...

    def send_text(self, message: str) -> None: ...


class BaseLocation(Protocol):
    position: "Point2"
    tile_position: "Point2"
    is_start_location: bool


class Terrain(Protocol):
    def get_base_locations(self) -> List[BaseLocation]: ...

    def is_connected(self, tile_a: "Point2", tile_b: "Point2") -> bool: ...


class PathFinder(Protocol):
    def find_path(
        self,
        source: "Point2",
        destination: "Point2",
        is_flyer: bool = False,
    ) -> List["Point2"]:
        """Ordered waypoints; raises NoPathFound if no walkable route exists."""
        ...


class Overlay(Protocol):
    def draw_text_map(self, x: int, y: int, text: str) -> None: ...

    def draw_text_screen(self, x: int, y: int, text: str) -> None: ...

    def draw_circle_map(self, x: int, y: int, radius: int, color, filled: bool = False) -> None: ...

    def draw_box_map(self, left: int, top: int, right: int, bottom: int, color, filled: bool = False) -> None: ...

    def draw_line_map(self, x1: int, y1: int, x2: int, y2: int, color) -> None: ...

