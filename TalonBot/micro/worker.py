"""
Worker — the SCV agent.

Task transitions
----------------
  IDLE         → MINERALS       unconditionally, on the next act()
  MINERALS/GAS → GAS/MINERALS   via gather() on a resource of the other kind
  any          → CONSTRUCTING   via build(plan)
  any          → SCOUTING       via set_task_mining(SCOUTING, None); leaves its base
  SCOUTING     → IDLE           when no path to the scouting target exists

Gatherer bookkeeping
--------------------
current_resource is only ever changed here, and every change updates the
old and new resource's gatherer sets in the same call. Nothing else in the
bot touches a Resource's gatherers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from TalonBot.errors import NoPathFound, Supersaturated
from TalonBot.logger import get_logger
from TalonBot.micro.agent import UnitAgent
from TalonBot.micro.unit_task import UnitTask

if TYPE_CHECKING:
    from TalonBot.construction.building_plan import BuildingPlan
    from TalonBot.economy.base import Base
    from TalonBot.economy.resource import Resource
    from TalonBot.host import Unit
    from TalonBot.micro.micro_manager import MicroManager

log = get_logger()

# Pixels from the build site centre at which the worker stops pathing and builds
BUILD_SITE_RADIUS: float = 96.0

# Pixels from a scouting target that count as having scouted it
SCOUT_ARRIVAL_DIST: float = 160.0


class Worker(UnitAgent):

    def __init__(self, unit: "Unit", manager: Optional["MicroManager"] = None) -> None:
        super().__init__(unit, manager)
        self.base: Optional["Base"] = None
        self.current_resource: Optional["Resource"] = None
        self.build_plan: Optional["BuildingPlan"] = None
        self.supersaturated: bool = False

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def gather(self, resource: "Resource") -> None:
        """Send the worker to ``resource``; the task follows the resource kind."""
        self.unit.gather(resource.get_unit())
        task = UnitTask.GAS if resource.is_gas else UnitTask.MINERALS
        self.set_task_mining(task, resource)

    def build(self, plan: "BuildingPlan") -> None:
        """Bind this worker to ``plan``. The build order is issued from act()."""
        plan.set_builder(self)
        self.build_plan = plan
        self.set_task(UnitTask.CONSTRUCTING)

    def set_task_mining(self, task: UnitTask, new_resource: Optional["Resource"]) -> None:
        """Change task, keeping resource gatherer counts exact."""
        self.set_task(task)
        if task != UnitTask.CONSTRUCTING:
            self._release_plan()

        if task in (UnitTask.MINERALS, UnitTask.GAS):
            if self.current_resource is not None:
                self.current_resource.remove_gatherer(self)
            if new_resource is not None:
                new_resource.add_gatherer(self)
                self.supersaturated = False
            self.current_resource = new_resource
        elif task == UnitTask.SCOUTING:
            if self.base is not None:
                # remove_worker runs unit_destroyed(), which releases the resource
                self.base.remove_worker(self.unit)
            self.base = None
            self.clear_path()

    def drop_resource(self) -> None:
        """Let go of the current resource (it vanished); gas miners fall back to minerals."""
        if self.current_resource is not None:
            self.current_resource.remove_gatherer(self)
            self.current_resource = None
        if self.task == UnitTask.GAS:
            self.set_task(UnitTask.MINERALS)

    def unit_destroyed(self) -> None:
        if self.current_resource is not None:
            self.current_resource.remove_gatherer(self)
            self.current_resource = None
        self._release_plan()

    def get_current_resource(self) -> Optional["Resource"]:
        return self.current_resource

    # ------------------------------------------------------------------
    # act()
    # ------------------------------------------------------------------

    def act(self) -> None:
        if self.task == UnitTask.SCOUTING:
            try:
                self.scout()
            except NoPathFound as exc:
                log.debug("Scout %d has no path: %s", self.id, exc, frame=self._frame())
                self.clear_path()
                self.set_task(UnitTask.IDLE)

        if self.task == UnitTask.IDLE:
            if self.base is None and self.manager is not None:
                self.manager.base_manager.adopt_worker(self)
            self.set_task(UnitTask.MINERALS)

        if self.task == UnitTask.MINERALS:
            if self.current_resource is not None:
                if not self.unit.is_gathering_minerals:
                    self.unit.gather(self.current_resource.get_unit())
                return
            self.mine_at_base()
        elif self.task == UnitTask.GAS:
            if self.current_resource is not None and not self.unit.is_gathering_gas:
                self.unit.gather(self.current_resource.get_unit())
        elif self.task == UnitTask.CONSTRUCTING:
            self.construct()

    def mine_at_base(self) -> None:
        """Take a mineral patch at the owning base under the saturation rule."""
        if self.base is None:
            log.warning("No base found for worker %d", self.id, frame=self._frame())
            return
        try:
            self.base.assign_mineral(self)
        except Supersaturated:
            if not self.supersaturated:
                self.supersaturated = True
                self.base.game.send_text("Warning: Base is supersaturated!")
                log.warning(
                    "Worker %d left idle, %r is supersaturated",
                    self.id, self.base,
                    frame=self._frame(),
                )

    def construct(self) -> None:
        plan = self.build_plan
        if plan is None:
            # Plan vanished under us; go back to mining
            if self.current_resource is not None:
                self.gather(self.current_resource)
            else:
                self.set_task(UnitTask.IDLE)
            return

        site = plan.get_center()
        if self.get_position().distance_to_point2(site) > BUILD_SITE_RADIUS:
            self.move_along_path(site)
        elif not self.unit.is_constructing:
            self.unit.build(plan.type, plan.get_tile_position())

    def scout(self) -> None:
        target = self.manager.get_scouting_target(self.unit)
        if target is None:
            log.debug("Worker %d found nothing to scout", self.id, frame=self._frame())
            self.set_task(UnitTask.IDLE)
            return

        if self.get_position().distance_to_point2(target) < SCOUT_ARRIVAL_DIST:
            base = self.manager.base_manager.get_closest_base(
                int(target.x), int(target.y), SCOUT_ARRIVAL_DIST,
            )
            if base is not None:
                base.set_last_scouted(self._frame())
            return

        self.move_along_path(target)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _release_plan(self) -> None:
        plan = self.build_plan
        self.build_plan = None
        if plan is not None and plan.builder is self:
            plan.set_builder(None)

    def _frame(self) -> Optional[int]:
        if self.manager is not None:
            return self.manager.game.frame_count
        if self.base is not None:
            return self.base.game.frame_count
        return None
