"""
MicroManager — one agent per controlled unit, driven once per frame.

Per frame
---------
  1. fields.update(enemies)   rebuild the target and threat grids
  2. agent.act()              for every registered agent, in insertion order

Step 1 always completes before step 2, so every agent reads the same field
values. An agent whose path finder gives up (NoPathFound) loses its action
for the frame. Any other failure propagates and aborts the frame.

Registry
--------
unit_agents maps unit id → agent; units_by_type maps UnitType → set of
agent ids. unit_created / unit_destroyed are the only writers and keep the
two in step.

Workers are shared with the BaseManager: if the base already wraps the
unit in a Worker, that same Worker is registered here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional, Set

from sc2.position import Point2

from TalonBot.debug import Color
from TalonBot.economy.base import BaseOwner
from TalonBot.errors import NoPathFound, UnrecognizedUnitType
from TalonBot.logger import get_logger
from TalonBot.micro.agent import UnitAgent
from TalonBot.micro.combat_agents import RangedAgent, WraithAgent
from TalonBot.micro.field_map import FieldMap
from TalonBot.micro.unit_task import UnitTask
from TalonBot.micro.worker import Worker
from TalonBot.unit_types import STATIC_DEFENSE_TYPES, UnitType

if TYPE_CHECKING:
    from TalonBot.debug import DebugEngine
    from TalonBot.economy.base import Base
    from TalonBot.economy.base_manager import BaseManager
    from TalonBot.host import Game, PathFinder, Terrain, Unit

log = get_logger()

# Unit types handled by RangedAgent
RANGED_TYPES = frozenset({UnitType.TERRAN_MARINE, UnitType.TERRAN_VULTURE})

# Pixel length of a full weapon cooldown bar
COOLDOWN_BAR_SIZE: int = 20

_TASK_LABELS = {
    UnitTask.IDLE: "Idle",
    UnitTask.MINERALS: "Minerals",
    UnitTask.GAS: "Gas",
    UnitTask.CONSTRUCTING: "Construction",
    UnitTask.SCOUTING: "Scouting",
    UnitTask.ATTACK_RUN: "Attack run",
    UnitTask.FIRING: "Firing",
    UnitTask.RETREATING: "Retreating",
}


class MicroManager:

    def __init__(
        self,
        game: "Game",
        terrain: "Terrain",
        path_finder: "PathFinder",
        base_manager: "BaseManager",
        debug_engine: Optional["DebugEngine"] = None,
    ) -> None:
        self.game = game
        self.terrain = terrain
        self.path_finder = path_finder
        self.base_manager = base_manager

        self.fields = FieldMap(game.map_width, game.map_height)

        self.unit_agents: Dict[int, UnitAgent] = {}
        self.units_by_type: Dict[UnitType, Set[int]] = {}

        if debug_engine is not None:
            self.register_debug_functions(debug_engine)

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def on_frame(self) -> None:
        self.fields.update(self.game.get_enemy_units())

        for agent in list(self.unit_agents.values()):
            try:
                agent.act()
            except NoPathFound as exc:
                log.debug("%r dropped its action: %s", agent, exc, frame=self.game.frame_count)

    # ------------------------------------------------------------------
    # Scouting
    # ------------------------------------------------------------------

    def get_scouting_target(self, requestor: "Unit") -> Optional[Point2]:
        """
        Where ``requestor`` should scout next.

        Unclaimed start locations come first, least recently scouted wins.
        Failing that, any base that was scouted least recently. Ground units
        skip bases they cannot walk to.
        """
        start_locations = [
            b for b in self.base_manager.bases
            if b.is_start_location() and b.owner == BaseOwner.NEUTRAL
        ]
        target = self._least_recently_scouted(start_locations, requestor)
        if target is None:
            target = self._least_recently_scouted(self.base_manager.bases, requestor)
        if target is None:
            return None
        return target.get_position()

    def _least_recently_scouted(self, bases: List["Base"], requestor: "Unit") -> Optional["Base"]:
        target = None
        for base in bases:
            if target is not None and base.last_scouted >= target.last_scouted:
                continue
            if not requestor.is_flyer and not self.terrain.is_connected(
                requestor.tile_position, base.location.tile_position,
            ):
                log.debug("Pruned scouting target %r, unreachable", base, frame=self.game.frame_count)
                continue
            target = base
        return target

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def unit_created(self, unit: "Unit") -> UnitAgent:
        """
        Register an agent for a new own unit.

        Raises UnrecognizedUnitType if no agent variant handles the type.
        """
        existing = self.unit_agents.get(unit.id)
        if existing is not None:
            log.warning("Duplicated unit %d found", unit.id, frame=self.game.frame_count)
            return existing

        unit_type = unit.type
        if unit_type.is_worker:
            agent = self.base_manager.get_worker(unit) or Worker(unit)
        elif unit_type in RANGED_TYPES:
            agent = RangedAgent(unit)
        elif unit_type == UnitType.TERRAN_WRAITH:
            agent = WraithAgent(unit)
        else:
            raise UnrecognizedUnitType(unit_type)

        agent.manager = self
        self.unit_agents[unit.id] = agent
        self.units_by_type.setdefault(unit_type, set()).add(unit.id)
        return agent

    def unit_destroyed(self, unit: "Unit") -> None:
        agent = self.unit_agents.pop(unit.id, None)
        if agent is None:
            return
        ids = self.units_by_type.get(unit.type)
        if ids is not None:
            ids.discard(unit.id)

    def get_units_by_type(self, unit_type: UnitType) -> List[UnitAgent]:
        return [self.unit_agents[i] for i in self.units_by_type.get(unit_type, ())]

    def get_agent_for_unit(self, unit: "Unit") -> Optional[UnitAgent]:
        return self.unit_agents.get(unit.id)

    # ------------------------------------------------------------------
    # Debug
    # ------------------------------------------------------------------

    def register_debug_functions(self, engine: "DebugEngine") -> None:
        engine.create_debug_module("staticd").set_draw(self._draw_static_defence)
        engine.create_debug_module("cooldowns").set_draw(self._draw_cooldowns)
        engine.create_debug_module("pathing").set_draw(self._draw_paths)
        engine.create_debug_module("agents").set_draw(self._draw_agents)
        engine.create_debug_module("tasks").set_draw(self._draw_tasks)

    def _draw_static_defence(self, engine: "DebugEngine") -> None:
        for unit in self.game.get_enemy_units():
            if unit.type not in STATIC_DEFENSE_TYPES:
                continue
            engine.draw_circle_map(unit.x, unit.y, unit.type.ground_range, Color.RED)
            engine.draw_circle_map(unit.x, unit.y, unit.type.air_range, Color.RED)

    def _draw_cooldowns(self, engine: "DebugEngine") -> None:
        for agent in self.unit_agents.values():
            unit = agent.unit
            max_cooldown = unit.type.ground_cooldown
            if max_cooldown <= 0:
                continue
            remaining = unit.ground_weapon_cooldown * COOLDOWN_BAR_SIZE // max_cooldown
            engine.draw_line_map(unit.x, unit.y, unit.x + COOLDOWN_BAR_SIZE, unit.y, Color.GREEN)
            engine.draw_line_map(unit.x, unit.y, unit.x + remaining, unit.y, Color.RED)

    def _draw_paths(self, engine: "DebugEngine") -> None:
        for agent in self.unit_agents.values():
            engine.draw_text_map(
                agent.get_x(), agent.get_y() + 15,
                f"Path: {len(agent.path)}/{agent.path_original_size} ({agent.path_start_frame})",
            )
            previous = None
            for waypoint in agent.path:
                if previous is not None:
                    engine.draw_arrow_map(previous.x, previous.y, waypoint.x, waypoint.y, Color.YELLOW)
                previous = waypoint
            if previous is not None and agent.path_target is not None:
                target = agent.path_target
                engine.draw_arrow_map(previous.x, previous.y, target.x, target.y, Color.YELLOW)

    def _draw_agents(self, engine: "DebugEngine") -> None:
        for agent in self.unit_agents.values():
            engine.draw_text_map(agent.get_x(), agent.get_y() - 15, agent.__class__.__name__)

    def _draw_tasks(self, engine: "DebugEngine") -> None:
        for agent in self.unit_agents.values():
            x, y = agent.get_x(), agent.get_y()
            engine.draw_text_map(x, y, _TASK_LABELS.get(agent.task, "Unknown"))
            if isinstance(agent, Worker) and agent.current_resource is not None:
                color = {UnitTask.GAS: Color.GREEN, UnitTask.MINERALS: Color.BLUE}.get(agent.task)
                if color is not None:
                    resource = agent.current_resource
                    engine.draw_line_map(x, y, resource.get_x(), resource.get_y(), color)
