"""
Base — one expansion location with its resources and the workers mining it.

A Base owns:
  - its mineral patches and geysers (keyed by host unit id)
  - the workers assigned to it (keyed by host unit id); each worker points
    back at the base through ``worker.base``

Mineral saturation rule
-----------------------
A worker without a patch takes the closest patch that has fewer than k
gatherers, trying k = 1 first and then k = 2. If every patch already has
MAX_MINERS_PER_PATCH gatherers the base is supersaturated and the worker
is left without a resource until a later frame.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional

from sc2.position import Point2

from TalonBot.economy.resource import GasResource, MineralResource, Resource
from TalonBot.errors import Supersaturated
from TalonBot.logger import get_logger
from TalonBot.micro.unit_task import UnitTask

if TYPE_CHECKING:
    from TalonBot.host import BaseLocation, Game, Player, Unit
    from TalonBot.micro.worker import Worker

log = get_logger()

# Gatherers per mineral patch before a base counts as supersaturated
MAX_MINERS_PER_PATCH: int = 2


class BaseOwner(Enum):
    SELF = "self"
    ENEMY = "enemy"
    NEUTRAL = "neutral"


def owner_of(player: "Player", game: "Game") -> BaseOwner:
    if player == game.self_player:
        return BaseOwner.SELF
    if player == game.neutral_player:
        return BaseOwner.NEUTRAL
    return BaseOwner.ENEMY


class Base:

    def __init__(self, game: "Game", location: "BaseLocation") -> None:
        self.game = game
        self.location = location

        self.owner: BaseOwner = BaseOwner.NEUTRAL
        self.resource_depot: Optional["Unit"] = None
        # Frame the base was last seen, 0 = never
        self.last_scouted: int = 0

        self.minerals: Dict[int, MineralResource] = {}
        self.gas: Dict[int, GasResource] = {}
        self.workers: Dict[int, "Worker"] = {}

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    def get_x(self) -> int:
        return int(self.location.position.x)

    def get_y(self) -> int:
        return int(self.location.position.y)

    def get_position(self) -> Point2:
        return Point2((self.get_x(), self.get_y()))

    def is_start_location(self) -> bool:
        return bool(self.location.is_start_location)

    # ------------------------------------------------------------------
    # Ownership / scouting
    # ------------------------------------------------------------------

    def set_owner(self, owner: BaseOwner) -> None:
        """Change owner; seeing the change counts as scouting the base."""
        self.owner = owner
        self.set_last_scouted()

    def set_last_scouted(self, frame: Optional[int] = None) -> None:
        self.last_scouted = self.game.frame_count if frame is None else frame

    # ------------------------------------------------------------------
    # Workers
    # ------------------------------------------------------------------

    def add_worker(self, unit: "Unit") -> "Worker":
        """Wrap a unit as a mineral worker of this base."""
        from TalonBot.micro.worker import Worker

        return self.attach_worker(Worker(unit))

    def attach_worker(self, worker: "Worker") -> "Worker":
        worker.base = self
        worker.set_task_mining(UnitTask.MINERALS, None)
        self.workers[worker.id] = worker
        return worker

    def remove_worker(self, unit: "Unit") -> bool:
        """
        Drop a worker from this base, releasing its resource.

        Returns False if the worker does not belong to this base.
        """
        worker = self.workers.pop(unit.id, None)
        if worker is None:
            return False
        worker.unit_destroyed()
        return True

    def get_worker_count(self) -> int:
        return len(self.workers)

    def get_mineral_worker_count(self) -> int:
        return sum(1 for w in self.workers.values() if w.task == UnitTask.MINERALS)

    def get_builder(self) -> Optional["Worker"]:
        """First mineral worker in iteration order, or None."""
        for worker in self.workers.values():
            if worker.task == UnitTask.MINERALS:
                return worker
        return None

    # ------------------------------------------------------------------
    # Mining
    # ------------------------------------------------------------------

    def choose_mineral(self, position: Point2) -> MineralResource:
        """
        Apply the saturation rule for a worker standing at ``position``.

        Raises Supersaturated if every patch is full.
        """
        for max_miners in range(1, MAX_MINERS_PER_PATCH + 1):
            candidates = [
                m for m in self.minerals.values()
                if m.get_num_gatherers() < max_miners
            ]
            if candidates:
                return min(
                    candidates,
                    key=lambda m: position.distance_to_point2(m.get_position()),
                )
        raise Supersaturated(self)

    def assign_mineral(self, worker: "Worker") -> MineralResource:
        """Pick a patch for ``worker`` and send it there."""
        mineral = self.choose_mineral(worker.get_position())
        worker.gather(mineral)
        return mineral

    def gather_resources(self) -> None:
        """Put idle miners back to work."""
        for worker in list(self.workers.values()):
            if not worker.unit.is_idle:
                continue
            if worker.task not in (UnitTask.MINERALS, UnitTask.GAS):
                continue
            log.debug("Idle worker %d detected", worker.id, frame=self.game.frame_count)
            if worker.current_resource is not None:
                worker.gather(worker.current_resource)
            else:
                worker.mine_at_base()

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def find_resource(self, unit: "Unit") -> Optional[Resource]:
        mineral = self.minerals.get(unit.id)
        if mineral is not None:
            return mineral
        for gas in self.gas.values():
            if gas.matches(unit):
                return gas
        return None

    def remove_resource(self, unit: "Unit") -> bool:
        """
        Forget a mined-out patch or a destroyed geyser. Workers mining it are
        released first so gatherer counts stay exact.

        A destroyed refinery only clears the geyser under it, which can then
        be queued for a new refinery.
        """
        resource = self.find_resource(unit)
        if resource is None:
            return False
        for worker in self.workers.values():
            if worker.current_resource is resource:
                worker.drop_resource()
        if resource.is_gas and resource.refinery is not None and resource.id != unit.id:
            resource.set_refinery(None)
            return True
        if resource.is_gas:
            del self.gas[resource.id]
        else:
            del self.minerals[resource.id]
        return True

    def __repr__(self) -> str:
        return (
            f"Base(({self.get_x()}, {self.get_y()}) {self.owner.value} "
            f"minerals={len(self.minerals)} gas={len(self.gas)} workers={len(self.workers)})"
        )
