"""
BuildingPlan — one building the bot intends to put down.

Lifecycle
---------
  queued      created by BuildManager.add_building(); builder is None
  dispatched  BuildManager.dispatch_builders() bound a worker (builder set)
  done        the host reported a finished building of the same type on the
              same tile; BuildManager.building_complete() drops the plan

If the builder dies the plan returns to queued and is dispatched again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from sc2.position import Point2

from TalonBot.geometry import TILE_SIZE
from TalonBot.unit_types import UnitType

if TYPE_CHECKING:
    from TalonBot.micro.worker import Worker


@dataclass
class BuildingPlan:
    """
    Fields
    ------
    type : UnitType
        What to build.
    tx, ty : int
        Top-left build tile of the footprint.
    builder : Worker | None
        The worker sent to build it, once dispatched.
    """
    type: UnitType
    tx: int
    ty: int
    builder: Optional["Worker"] = field(default=None, compare=False)

    def get_tile_position(self) -> Point2:
        return Point2((self.tx, self.ty))

    def get_center(self) -> Point2:
        """Pixel centre of the footprint."""
        return Point2((
            self.tx * TILE_SIZE + self.type.tile_width * TILE_SIZE // 2,
            self.ty * TILE_SIZE + self.type.tile_height * TILE_SIZE // 2,
        ))

    def set_builder(self, worker: Optional["Worker"]) -> None:
        self.builder = worker

    def overlaps(self, left: int, top: int, unit_type: UnitType) -> bool:
        """True if a ``unit_type`` footprint at (left, top) touches this plan's."""
        return (
            self.tx <= left + unit_type.tile_width
            and self.tx + self.type.tile_width >= left
            and self.ty <= top + unit_type.tile_height
            and self.ty + self.type.tile_height >= top
        )

    def matches(self, unit) -> bool:
        """True if ``unit`` is the finished building this plan asked for."""
        tile = unit.tile_position
        return unit.type == self.type and int(tile[0]) == self.tx and int(tile[1]) == self.ty

    def __str__(self) -> str:
        builder = self.builder.id if self.builder is not None else None
        return f"{self.type.name}@({self.tx}, {self.ty}) builder={builder}"
