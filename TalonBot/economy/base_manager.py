"""
BaseManager — every base on the map, who owns it, and what it holds.

Bases come from terrain analysis and never change. At construction every
neutral mineral field and geyser is handed to the closest base within
BASE_RADIUS pixels. After that the manager only reacts to host events:

  resource_depot_shown      base changes owner (and counts as scouted)
  resource_depot_hidden     base counts as scouted
  resource_depot_destroyed  base goes back to neutral
  refinery_complete         geyser becomes harvestable
  worker_complete           new SCV joins the closest base
  unit_destroyed            worker / mineral / geyser / refinery removal

After any handler returns, no worker or resource belongs to two bases.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterator, List, Optional

from TalonBot.debug import Color
from TalonBot.economy.base import Base, BaseOwner, owner_of
from TalonBot.economy.resource import GasResource, MineralResource, Resource
from TalonBot.logger import get_logger
from TalonBot.micro.unit_task import UnitTask
from TalonBot.unit_types import UnitKind, unit_kind

if TYPE_CHECKING:
    from TalonBot.debug import DebugEngine
    from TalonBot.host import Game, Terrain, Unit
    from TalonBot.micro.worker import Worker

log = get_logger()

# Pixels around a base location searched for its resources and depot
BASE_RADIUS: int = 300

# Pixels a refinery may sit from the geyser it was built on
REFINERY_MATCH_DIST: float = 64.0

_TASK_COLORS = {
    UnitTask.MINERALS: Color.BLUE,
    UnitTask.GAS: Color.GREEN,
    UnitTask.CONSTRUCTING: Color.ORANGE,
}


class BaseManager:

    def __init__(self, game: "Game", terrain: "Terrain",
                 debug_engine: Optional["DebugEngine"] = None) -> None:
        self.game = game
        self.terrain = terrain
        self.bases: List[Base] = [Base(game, location) for location in terrain.get_base_locations()]
        self.main: Optional[Base] = None

        for unit in game.get_neutral_units():
            kind = unit_kind(unit.type)
            if kind not in (UnitKind.MINERAL_FIELD, UnitKind.GEYSER):
                continue
            base = self.get_closest_base(unit.x, unit.y, BASE_RADIUS)
            if base is None:
                continue
            if kind == UnitKind.MINERAL_FIELD:
                base.minerals[unit.id] = MineralResource(unit)
            else:
                base.gas[unit.id] = GasResource(unit)

        log.info(
            "BaseManager: %d bases, %d mineral fields, %d geysers",
            len(self.bases),
            sum(len(b.minerals) for b in self.bases),
            sum(len(b.gas) for b in self.bases),
        )

        if debug_engine is not None:
            self.register_debug_functions(debug_engine)

    def __iter__(self) -> Iterator[Base]:
        return iter(self.bases)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_closest_base(self, x: int, y: int, max_distance: float) -> Optional[Base]:
        closest = None
        closest_distance = math.inf
        for base in self.bases:
            distance = math.hypot(x - base.get_x(), y - base.get_y())
            if distance < closest_distance and distance < max_distance:
                closest = base
                closest_distance = distance
        return closest

    def get_my_bases(self) -> List[Base]:
        return [b for b in self.bases if b.owner == BaseOwner.SELF]

    def get_builder(self) -> Optional["Worker"]:
        for base in self.bases:
            worker = base.get_builder()
            if worker is not None:
                return worker
        return None

    def get_worker(self, unit: Optional["Unit"]) -> Optional["Worker"]:
        if unit is None:
            return None
        for base in self.bases:
            worker = base.workers.get(unit.id)
            if worker is not None:
                return worker
        return None

    def get_resource(self, unit: "Unit") -> Optional[Resource]:
        for base in self.bases:
            resource = base.find_resource(unit)
            if resource is not None:
                return resource
        return None

    def gather_resources(self) -> None:
        for base in self.bases:
            base.gather_resources()

    def adopt_worker(self, worker: "Worker") -> Optional[Base]:
        """Attach a base-less worker (a returning scout) to the closest own base."""
        candidates = self.get_my_bases()
        if not candidates:
            return None
        base = min(
            candidates,
            key=lambda b: math.hypot(worker.get_x() - b.get_x(), worker.get_y() - b.get_y()),
        )
        base.attach_worker(worker)
        return base

    # ------------------------------------------------------------------
    # Host events
    # ------------------------------------------------------------------

    def unit_destroyed(self, unit: "Unit") -> None:
        kind = unit_kind(unit.type)
        if kind == UnitKind.WORKER:
            for base in self.bases:
                if base.remove_worker(unit):
                    break
        elif kind in (UnitKind.MINERAL_FIELD, UnitKind.GEYSER, UnitKind.REFINERY):
            for base in self.bases:
                if base.remove_resource(unit):
                    break

    def refinery_complete(self, unit: "Unit") -> Optional[GasResource]:
        """Mark the geyser under a finished refinery as taken."""
        base = self.get_closest_base(unit.x, unit.y, BASE_RADIUS)
        if base is None:
            log.warning("Refinery %d completed away from any base", unit.id, frame=self.game.frame_count)
            return None

        geyser = None
        for gas in base.gas.values():
            if gas.matches(unit) or (
                not gas.gas_taken()
                and math.hypot(gas.get_x() - unit.x, gas.get_y() - unit.y) <= REFINERY_MATCH_DIST
            ):
                geyser = gas
                break
        if geyser is None:
            geyser = GasResource(unit)
            base.gas[unit.id] = geyser
        geyser.set_refinery(unit)

        log.game_event("REFINERY_DONE", f"{base!r}", frame=self.game.frame_count)
        return geyser

    def resource_depot_shown(self, unit: "Unit") -> None:
        base = self.get_closest_base(unit.x, unit.y, BASE_RADIUS)
        if base is None:
            return
        base.resource_depot = unit
        base.set_owner(owner_of(unit.player, self.game))
        if base.owner == BaseOwner.SELF and self.main is None:
            self.main = base
            log.game_event("MAIN_BASE", f"{base!r}", frame=self.game.frame_count)

    def resource_depot_hidden(self, unit: "Unit") -> None:
        base = self.get_closest_base(unit.x, unit.y, BASE_RADIUS)
        if base is not None:
            base.set_last_scouted()

    def resource_depot_destroyed(self, unit: "Unit") -> None:
        base = self.get_closest_base(unit.x, unit.y, BASE_RADIUS)
        if base is None:
            return
        base.resource_depot = None
        base.set_owner(BaseOwner.NEUTRAL)
        if base is self.main:
            self.main = None
        log.game_event("BASE_LOST", f"{base!r}", frame=self.game.frame_count)

    def worker_complete(self, unit: "Unit") -> Optional["Worker"]:
        existing = self.get_worker(unit)
        if existing is not None:
            return existing
        base = self.get_closest_base(unit.x, unit.y, BASE_RADIUS)
        if base is None:
            return None
        return base.add_worker(unit)

    # ------------------------------------------------------------------
    # Debug
    # ------------------------------------------------------------------

    def register_debug_functions(self, engine: "DebugEngine") -> None:
        engine.create_debug_module("bases").set_draw(self._draw_bases)

    def _draw_bases(self, engine: "DebugEngine") -> None:
        if self.main is not None:
            engine.draw_text_map(self.main.get_x(), self.main.get_y(), "Main")

        for base in self.bases:
            x, y = base.get_x(), base.get_y()
            engine.draw_circle_map(x, y, 100, Color.TEAL)
            engine.draw_text_map(x + 5, y + 5, f"Status: {base.owner.value} @ {base.last_scouted}")

            depot = base.resource_depot
            if depot is not None:
                tx, ty = int(depot.tile_position.x), int(depot.tile_position.y)
                engine.draw_box_map(tx * 32, ty * 32, (tx + 4) * 32, (ty + 3) * 32, Color.TEAL)

            for mineral in base.minerals.values():
                engine.draw_text_map(mineral.get_x() - 8, mineral.get_y() - 8,
                                     str(mineral.get_num_gatherers()))
            for gas in base.gas.values():
                engine.draw_text_map(gas.get_x(), gas.get_y(),
                                     "Refinery" if gas.gas_taken() else "Geyser")

            engine.draw_text_map(x + 5, y + 15, f"Mineral Miners: {base.get_mineral_worker_count()}")
            engine.draw_text_map(x + 5, y + 25, f"Mineral Fields: {len(base.minerals)}")

            for worker in base.workers.values():
                color = _TASK_COLORS.get(worker.task)
                if color is not None:
                    engine.draw_circle_map(worker.get_x(), worker.get_y(), 3, color, True)
