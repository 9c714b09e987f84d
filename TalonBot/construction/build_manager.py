"""
BuildManager — what the bot wants built or trained, and where.

Two FIFO queues:
  building_queue   BuildingPlan per building, placed on a concrete tile
  unit_queue       UnitType per trainable unit

Entries leave the queues only when the host reports the finished unit
(building_complete), or when a half-built building of a plan is destroyed
(unit_destroyed).

Placement
---------
Buildings other than refineries go near the main base. The search scans a
square of radius PLACEMENT_START_DIST tiles around the main base tile and
widens it by one tile each pass until PLACEMENT_STOP_DIST. A tile is taken
when
  - the footprint (minus its last row and column) is buildable, and no
    queued plan's footprint touches it
  - no unit stands within UNIT_CLEARANCE_TILES build tiles of it
Running out of radius raises PlacementExhausted. Nothing is retried here;
check_minimums runs again on the next frame.

Refineries go on a geyser: tile (gas.x/32 - 2, gas.y/32 - 1) covers it.

Minimums
--------
unit_minimums maps a type to a required count. check_minimums() queues one
more of each type whose built + queued count is below its minimum.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional

from sc2.position import Point2

from TalonBot.construction.building_plan import BuildingPlan
from TalonBot.debug import Color
from TalonBot.errors import PlacementExhausted
from TalonBot.geometry import TILE_SIZE
from TalonBot.logger import get_logger
from TalonBot.micro.unit_task import UnitTask
from TalonBot.unit_types import UnitType

if TYPE_CHECKING:
    from TalonBot.debug import DebugEngine
    from TalonBot.economy.base_manager import BaseManager
    from TalonBot.economy.resource import GasResource
    from TalonBot.host import Game, Unit

log = get_logger()

# ---------------------------------------------------------------------------
# Placement search tuning (build tiles)
# ---------------------------------------------------------------------------

PLACEMENT_START_DIST: int = 3
PLACEMENT_STOP_DIST: int = 40

# A unit closer than this many tiles (on both axes) blocks a candidate tile
UNIT_CLEARANCE_TILES: int = 4


class BuildManager:
    """
    Owns the building and training queues and the unit minimums.

    One instance lives on the bot as ``self.build_manager``.
    """

    def __init__(self, game: "Game", base_manager: "BaseManager",
                 debug_engine: Optional["DebugEngine"] = None) -> None:
        self.game = game
        self.base_manager = base_manager

        self.unit_minimums: Dict[UnitType, int] = {}
        self.building_queue: List[BuildingPlan] = []
        self.unit_queue: List[UnitType] = []

        if debug_engine is not None:
            self.register_debug_functions(debug_engine)

    # ------------------------------------------------------------------
    # Queueing
    # ------------------------------------------------------------------

    def add_to_queue(self, unit_type: UnitType, count: int = 1) -> None:
        """
        Queue ``count`` of ``unit_type``.

        Raises PlacementExhausted if a building has no legal tile near the
        main base. Plans queued before the failure stay queued.
        """
        for _ in range(count):
            if unit_type.is_refinery:
                self._queue_refinery(unit_type)
            elif unit_type.is_building:
                main = self.base_manager.main
                if main is None:
                    log.warning("No main base to build %s near", unit_type.name,
                                frame=self.game.frame_count)
                    return
                location = self.get_build_location(main.get_x(), main.get_y(), unit_type)
                self.add_building(int(location.x), int(location.y), unit_type)
            else:
                self.unit_queue.append(unit_type)

    def add_building(self, tx: int, ty: int, unit_type: UnitType) -> BuildingPlan:
        plan = BuildingPlan(unit_type, tx, ty)
        self.building_queue.append(plan)
        log.game_event("PLAN_QUEUED", str(plan), frame=self.game.frame_count)
        return plan

    def _queue_refinery(self, unit_type: UnitType) -> Optional[BuildingPlan]:
        for base in self.base_manager.get_my_bases():
            for gas in base.gas.values():
                if gas.gas_taken():
                    continue
                tx, ty = self._refinery_tile(gas)
                if self._plan_at(unit_type, tx, ty) is not None:
                    continue
                return self.add_building(tx, ty, unit_type)
        self.game.send_text("Wanted to take another gas, but none left!")
        return None

    @staticmethod
    def _refinery_tile(gas: "GasResource") -> tuple:
        return gas.get_x() // TILE_SIZE - 2, gas.get_y() // TILE_SIZE - 1

    def set_minimum(self, unit_type: UnitType, minimum: int) -> None:
        self.unit_minimums[unit_type] = minimum

    # ------------------------------------------------------------------
    # Placement search
    # ------------------------------------------------------------------

    def get_build_location(self, x: int, y: int, unit_type: UnitType) -> Point2:
        """
        First legal build tile for ``unit_type`` around pixel (x, y).

        Raises PlacementExhausted when the search radius reaches
        PLACEMENT_STOP_DIST.
        """
        tile_x = x // TILE_SIZE
        tile_y = y // TILE_SIZE
        units = list(self.game.get_all_units())

        max_dist = PLACEMENT_START_DIST
        while max_dist < PLACEMENT_STOP_DIST:
            for i in range(tile_x - max_dist, tile_x + max_dist + 1):
                for j in range(tile_y - max_dist, tile_y + max_dist + 1):
                    if not self.can_build_here(i, j, unit_type):
                        continue
                    if self._units_in_way(units, i, j):
                        continue
                    return Point2((i, j))
            max_dist += 1

        log.warning("No build location for %s", unit_type.name, frame=self.game.frame_count)
        raise PlacementExhausted(unit_type, PLACEMENT_STOP_DIST)

    def can_build_here(self, left: int, top: int, unit_type: UnitType) -> bool:
        width = unit_type.tile_width
        height = unit_type.tile_height

        for i in range(left, left + width - 1):
            for j in range(top, top + height - 1):
                if not self.game.is_buildable(i, j, True):
                    return False

        for plan in self.building_queue:
            if plan.overlaps(left, top, unit_type):
                return False
        return True

    @staticmethod
    def _units_in_way(units: List["Unit"], i: int, j: int) -> bool:
        for unit in units:
            if (abs(unit.x // TILE_SIZE - i) < UNIT_CLEARANCE_TILES
                    and abs(unit.y // TILE_SIZE - j) < UNIT_CLEARANCE_TILES):
                return True
        return False

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def dispatch_builders(self) -> None:
        """Bind a mineral worker to every plan that has no builder."""
        for plan in self.building_queue:
            if plan.builder is not None:
                continue
            worker = self.base_manager.get_builder()
            if worker is None:
                return
            worker.build(plan)
            log.debug("Worker %d dispatched to %s", worker.id, plan, frame=self.game.frame_count)

    # ------------------------------------------------------------------
    # Host events
    # ------------------------------------------------------------------

    def building_complete(self, unit: "Unit") -> None:
        unit_type = unit.type
        if not unit_type.is_building:
            if unit_type in self.unit_queue:
                self.unit_queue.remove(unit_type)
            return

        plan = self._plan_for(unit)
        if plan is None:
            return
        self.building_queue.remove(plan)
        log.game_event("PLAN_DONE", str(plan), frame=self.game.frame_count)

        builder = plan.builder
        if unit_type.is_refinery:
            self.base_manager.refinery_complete(unit)
            resource = self.base_manager.get_resource(unit)
            if builder is not None and resource is not None:
                builder.gather(resource)
        elif builder is not None:
            self._release_builder(builder)

    def unit_destroyed(self, unit: "Unit") -> None:
        for plan in self.building_queue:
            if plan.builder is not None and plan.builder.id == unit.id:
                plan.set_builder(None)

        if unit.type.is_building and unit.is_being_constructed:
            plan = self._plan_for(unit)
            if plan is not None:
                self.building_queue.remove(plan)
                if plan.builder is not None:
                    self._release_builder(plan.builder)
                log.game_event("PLAN_LOST", str(plan), frame=self.game.frame_count)

    @staticmethod
    def _release_builder(builder) -> None:
        resource = builder.get_current_resource()
        if resource is not None:
            builder.gather(resource)
        else:
            builder.set_task_mining(UnitTask.IDLE, None)

    # ------------------------------------------------------------------
    # Counting
    # ------------------------------------------------------------------

    def _plan_at(self, unit_type: UnitType, tx: int, ty: int) -> Optional[BuildingPlan]:
        for plan in self.building_queue:
            if plan.type == unit_type and plan.tx == tx and plan.ty == ty:
                return plan
        return None

    def _plan_for(self, unit: "Unit") -> Optional[BuildingPlan]:
        """The queued plan a finished or half-built ``unit`` belongs to."""
        for plan in self.building_queue:
            if plan.matches(unit):
                return plan
        return None

    def is_in_queue(self, unit_type: UnitType) -> bool:
        return self.get_count_in_queue(unit_type) > 0

    def get_count_in_queue(self, unit_type: UnitType) -> int:
        planned = sum(1 for plan in self.building_queue if plan.type == unit_type)
        return planned + self.unit_queue.count(unit_type)

    def get_my_unit_count(self, unit_type: UnitType) -> int:
        """Own units of ``unit_type`` that are fully constructed."""
        return sum(
            1 for unit in self.game.get_all_units()
            if unit.type == unit_type
            and unit.player == self.game.self_player
            and not unit.is_being_constructed
        )

    def check_minimums(self) -> None:
        for unit_type, required in list(self.unit_minimums.items()):
            current = self.get_my_unit_count(unit_type)
            queued = self.get_count_in_queue(unit_type)
            if current + queued >= required:
                continue
            self.game.send_text(f"Queuing up another {unit_type.value}")
            try:
                self.add_to_queue(unit_type)
            except PlacementExhausted as exc:
                log.warning("%s, retrying next frame", exc, frame=self.game.frame_count)

    # ------------------------------------------------------------------
    # Debug
    # ------------------------------------------------------------------

    def register_debug_functions(self, engine: "DebugEngine") -> None:
        engine.create_debug_module("buildingqueue").set_draw(self._draw_building_queue)
        engine.create_debug_module("trainingqueue").set_draw(self._draw_training_queue)
        engine.create_debug_module("unitminimums").set_draw(self._draw_unit_minimums)

    def _draw_building_queue(self, engine: "DebugEngine") -> None:
        for plan in self.building_queue:
            x = plan.tx * TILE_SIZE
            y = plan.ty * TILE_SIZE
            width = plan.type.tile_width * TILE_SIZE
            height = plan.type.tile_height * TILE_SIZE
            engine.draw_box_map(x, y, x + width, y + height, Color.GREEN)
            engine.draw_text_map(x, y, plan.type.value)
            if plan.builder is not None:
                engine.draw_line_map(plan.builder.get_x(), plan.builder.get_y(),
                                     x + width // 2, y + height // 2, Color.GREEN)
        text = ", ".join(str(plan) for plan in self.building_queue)
        engine.draw_text_screen(5, 20, f"Building Queue: {text}")

    def _draw_training_queue(self, engine: "DebugEngine") -> None:
        text = ", ".join(unit_type.value for unit_type in self.unit_queue)
        engine.draw_text_screen(5, 40, f"Training Queue: {text}")

    def _draw_unit_minimums(self, engine: "DebugEngine") -> None:
        engine.draw_text_screen(5, 80, "Unit Minimums: current(queued)/required")
        y = 90
        for unit_type, required in self.unit_minimums.items():
            queued = self.get_count_in_queue(unit_type)
            current = self.get_my_unit_count(unit_type)
            if queued or current or required:
                engine.draw_text_screen(5, y, f"{unit_type.value}: {current}({queued})/{required}")
                y += 10
