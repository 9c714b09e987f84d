"""
UnitAgent — per-unit state and the act() hook driven by the MicroManager.

Every agent carries the same path-following state: the remaining waypoints,
the size the path had when it was computed, the frame it was computed on,
and the position it leads to. move_along_path() refreshes that path from
the host path finder when the destination changes or the path goes stale,
and then steps the unit to the next waypoint.

Variants
--------
    Worker       — mining, build-site travel, scouting   (micro/worker.py)
    RangedAgent  — marines and vultures                   (micro/combat_agents.py)
    WraithAgent  — wraiths                                (micro/combat_agents.py)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

from sc2.position import Point2

from TalonBot.geometry import position_of, tile_of
from TalonBot.logger import get_logger
from TalonBot.micro.unit_task import UnitTask

if TYPE_CHECKING:
    from TalonBot.host import Unit
    from TalonBot.micro.micro_manager import MicroManager

log = get_logger()

# Frames after which a path is recomputed even if the destination is unchanged
PATH_REFRESH_FRAMES: int = 240

# Pixels from a waypoint that count as having reached it
WAYPOINT_ARRIVAL_DIST: float = 48.0


class UnitAgent(ABC):

    def __init__(self, unit: "Unit", manager: Optional["MicroManager"] = None) -> None:
        self.unit = unit
        self.id: int = unit.id
        self.manager = manager
        self.task: UnitTask = UnitTask.IDLE

        self.path: List[Point2] = []
        self.path_original_size: int = 0
        self.path_start_frame: int = 0
        self.path_target: Optional[Point2] = None

    @abstractmethod
    def act(self) -> None:
        """Issue this frame's commands for the unit."""

    # ------------------------------------------------------------------
    # Task
    # ------------------------------------------------------------------

    def set_task(self, task: UnitTask) -> None:
        if task != self.task:
            log.agent_task(
                self.__class__.__name__,
                unit_id=self.id,
                old_task=self.task.name,
                new_task=task.name,
                frame=self._frame(),
            )
        self.task = task

    # ------------------------------------------------------------------
    # Position
    # ------------------------------------------------------------------

    def get_x(self) -> int:
        return self.unit.x

    def get_y(self) -> int:
        return self.unit.y

    def get_position(self) -> Point2:
        return position_of(self.unit)

    def get_tile(self) -> Point2:
        return tile_of(self.unit)

    # ------------------------------------------------------------------
    # Path following
    # ------------------------------------------------------------------

    def move_along_path(self, target: Point2) -> None:
        """
        Step toward ``target`` along a path from the path finder.

        Raises NoPathFound (from the path finder) if the target is unreachable.
        """
        frame = self._frame()
        position = self.get_position()

        stale = frame - self.path_start_frame > PATH_REFRESH_FRAMES
        if self.path_target != target or stale:
            self.path = list(self.manager.path_finder.find_path(
                position, target, self.unit.is_flyer,
            ))
            self.path_original_size = len(self.path)
            self.path_start_frame = frame
            self.path_target = target

        while self.path and position.distance_to_point2(self.path[0]) < WAYPOINT_ARRIVAL_DIST:
            self.path.pop(0)

        self.unit.move(self.path[0] if self.path else target)

    def clear_path(self) -> None:
        self.path = []
        self.path_original_size = 0
        self.path_target = None

    def _frame(self) -> Optional[int]:
        if self.manager is None:
            return None
        return self.manager.game.frame_count

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id} {self.task.name})"
