"""
Talon Bot - Main Bot Class

Receives host callbacks and runs the decision core once per frame:

  host events  → BaseManager / BuildManager / MicroManager update the world
  on_frame     → check_minimums
               → dispatch_builders
               → gather_resources (every IDLE_SWEEP_INTERVAL frames)
               → MicroManager.on_frame (fields, then every agent acts)
               → DebugEngine.draw

The glue layer owns the game loop. It builds a TalonBot around the host
handles, calls on_start once, forwards every event for frame t, and then
calls on_frame for t.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from config import (
    ACTIVE_DEBUG_MODULES,
    BOT_NAME,
    IDLE_SWEEP_INTERVAL,
    SCOUT_AT_FRAME,
    UNIT_MINIMUMS,
)
from TalonBot.construction import BuildManager
from TalonBot.debug import DebugEngine
from TalonBot.economy import BaseManager
from TalonBot.errors import InvalidCommand, UnrecognizedUnitType
from TalonBot.logger import get_logger
from TalonBot.micro.micro_manager import MicroManager
from TalonBot.micro.unit_task import UnitTask
from TalonBot.unit_types import UnitKind, UnitType, unit_kind

if TYPE_CHECKING:
    from TalonBot.host import Game, Overlay, PathFinder, Terrain, Unit
    from TalonBot.micro.worker import Worker


log = get_logger()


class TalonBot:
    """
    Wires the managers together and routes host events to them.

    The managers are created in on_start, once the host can answer map
    queries.
    """

    def __init__(self, game: "Game", terrain: "Terrain",
                 path_finder: "PathFinder", overlay: "Overlay") -> None:
        log.info("=" * 50)
        log.info("%s INITIALIZING", BOT_NAME.upper())
        log.info("=" * 50)

        self.game = game
        self.terrain = terrain
        self.path_finder = path_finder
        self.overlay = overlay

        # Managers (created in on_start)
        self.debug_engine: Optional[DebugEngine] = None
        self.base_manager: Optional[BaseManager] = None
        self.build_manager: Optional[BuildManager] = None
        self.micro_manager: Optional[MicroManager] = None

        self.scout_sent: bool = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def on_start(self) -> None:
        """Build the managers and register everything already on the map."""
        game = self.game

        self.debug_engine = DebugEngine(self.overlay)
        self.base_manager = BaseManager(game, self.terrain, self.debug_engine)
        self.build_manager = BuildManager(game, self.base_manager, self.debug_engine)
        self.micro_manager = MicroManager(
            game, self.terrain, self.path_finder, self.base_manager, self.debug_engine,
        )

        for name, minimum in UNIT_MINIMUMS.items():
            self.build_manager.set_minimum(UnitType(name), minimum)

        for name in ACTIVE_DEBUG_MODULES:
            module = self.debug_engine.modules.get(name)
            if module is None:
                log.warning("Unknown debug module in config: %s", name, frame=game.frame_count)
                continue
            module.set_active(True)

        for unit in list(game.get_all_units()):
            if unit.type.is_resource_depot:
                self.base_manager.resource_depot_shown(unit)
        for unit in list(game.get_all_units()):
            if self._is_mine(unit) and not unit.is_being_constructed:
                self._register_unit(unit)

        log.game_event("GAME_START", f"{len(self.micro_manager.unit_agents)} agents", frame=game.frame_count)
        game.send_text(f"{BOT_NAME} online.")

    def on_frame(self) -> None:
        frame = self.game.frame_count

        self.build_manager.check_minimums()
        self.build_manager.dispatch_builders()

        if frame % IDLE_SWEEP_INTERVAL == 0:
            self.base_manager.gather_resources()

        if SCOUT_AT_FRAME is not None and not self.scout_sent and frame >= SCOUT_AT_FRAME:
            self.send_scout()

        self.micro_manager.on_frame()
        self.debug_engine.draw()

    # ------------------------------------------------------------------
    # Host events
    # ------------------------------------------------------------------

    def on_unit_show(self, unit: "Unit") -> None:
        if unit.type.is_resource_depot:
            self.base_manager.resource_depot_shown(unit)

    def on_unit_hide(self, unit: "Unit") -> None:
        if unit.type.is_resource_depot:
            self.base_manager.resource_depot_hidden(unit)

    def on_unit_complete(self, unit: "Unit") -> None:
        if not self._is_mine(unit):
            return
        self.build_manager.building_complete(unit)
        if unit.type.is_resource_depot:
            self.base_manager.resource_depot_shown(unit)
        self._register_unit(unit)

    def on_unit_destroy(self, unit: "Unit") -> None:
        if unit_kind(unit.type) == UnitKind.RESOURCE_DEPOT:
            self.base_manager.resource_depot_destroyed(unit)
        self.base_manager.unit_destroyed(unit)
        if self._is_mine(unit):
            self.build_manager.unit_destroyed(unit)
            self.micro_manager.unit_destroyed(unit)

    def on_send_text(self, text: str) -> None:
        """Text typed in game is a debug command."""
        try:
            self.debug_engine.on_receive_command(text)
        except InvalidCommand as exc:
            log.info("%s", exc, frame=self.game.frame_count)
            self.game.send_text(str(exc))

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def send_scout(self) -> Optional["Worker"]:
        """Pull one mineral worker off its base to scout."""
        worker = self.base_manager.get_builder()
        if worker is None:
            return None
        worker.set_task_mining(UnitTask.SCOUTING, None)
        self.scout_sent = True
        log.game_event("SCOUT_SENT", f"worker {worker.id}", frame=self.game.frame_count)
        return worker

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _is_mine(self, unit: "Unit") -> bool:
        return unit.player == self.game.self_player

    def _register_unit(self, unit: "Unit") -> None:
        if unit.type.is_building:
            return
        if unit.type.is_worker:
            self.base_manager.worker_complete(unit)
        try:
            self.micro_manager.unit_created(unit)
        except UnrecognizedUnitType as exc:
            log.debug("%s, not tracked", exc, frame=self.game.frame_count)
