"""
Harvestable resources: mineral patches and vespene geysers.

A Resource only counts its gatherers. The count is changed exclusively by
Worker.set_task_mining (and the worker's destruction hook, which goes
through the same bookkeeping), never by the resource itself or a manager.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Set

from sc2.position import Point2

if TYPE_CHECKING:
    from TalonBot.host import Unit
    from TalonBot.micro.worker import Worker


class Resource:
    """One mineral patch or geyser, identified by its host unit id."""

    is_gas: bool = False

    def __init__(self, unit: "Unit") -> None:
        self.unit = unit
        self.id: int = unit.id
        self._gatherers: Set[int] = set()

    def add_gatherer(self, worker: "Worker") -> None:
        self._gatherers.add(worker.id)

    def remove_gatherer(self, worker: "Worker") -> None:
        self._gatherers.discard(worker.id)

    def get_num_gatherers(self) -> int:
        return len(self._gatherers)

    def get_position(self) -> Point2:
        return Point2((self.unit.x, self.unit.y))

    def get_x(self) -> int:
        return self.unit.x

    def get_y(self) -> int:
        return self.unit.y

    def get_unit(self) -> "Unit":
        """The unit a worker must be ordered to gather from."""
        return self.unit

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(id={self.id} @ ({self.get_x()}, {self.get_y()}) "
            f"gatherers={self.get_num_gatherers()})"
        )


class MineralResource(Resource):
    pass


class GasResource(Resource):
    """
    A vespene geyser. Only harvestable once a refinery stands on it; the
    refinery unit then becomes the gather target.
    """

    is_gas = True

    def __init__(self, unit: "Unit") -> None:
        super().__init__(unit)
        self.refinery: Optional["Unit"] = unit if unit.type.is_refinery else None

    def gas_taken(self) -> bool:
        return self.refinery is not None

    def set_refinery(self, refinery: Optional["Unit"]) -> None:
        self.refinery = refinery

    def get_unit(self) -> "Unit":
        return self.refinery if self.refinery is not None else self.unit

    def matches(self, unit: "Unit") -> bool:
        """True if ``unit`` is this geyser or the refinery built on it."""
        if unit.id == self.id:
            return True
        return self.refinery is not None and self.refinery.id == unit.id
