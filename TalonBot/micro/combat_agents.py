"""
Combat agents — marines, vultures and wraiths.

Each frame a combat agent reads the MicroManager's field map and picks one
of four tasks, in priority order:

  RETREATING  threat on its tile exceeds its durability proxy
              (hit points * DURABILITY_FACTOR); it steps to the
              least-threatened tile within reach.
  FIRING      an enemy is inside weapon range; attack it when the weapon
              is off cooldown.
  ATTACK_RUN  some tile within reach has positive target value; move to
              the tile maximising target / (1 + threat), ties to the
              closer tile.
  IDLE        nothing to do. Wraiths scout instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sc2.position import Point2

from TalonBot.geometry import position_of, tile_center
from TalonBot.micro.agent import UnitAgent
from TalonBot.micro.unit_task import UnitTask

if TYPE_CHECKING:
    from TalonBot.host import Unit


class CombatAgent(UnitAgent):
    """Shared retreat / fire / attack-run loop."""

    # Threat the unit tolerates per hit point
    DURABILITY_FACTOR: float = 1.0
    # Tiles the unit can cover in one move
    MOVE_TILES: int = 4

    def act(self) -> None:
        fields = self.manager.fields
        tile = self.get_tile()
        tx, ty = int(tile.x), int(tile.y)

        if fields.threat_at(tx, ty) > self.durability():
            self.retreat(tx, ty)
            return

        target = self.select_target()
        if target is not None:
            self.set_task(UnitTask.FIRING)
            if self.unit.ground_weapon_cooldown == 0:
                self.unit.attack(target)
            return

        best = fields.best_target_tile(tx, ty, self.MOVE_TILES)
        if best is not None and fields.target_at(*best) > 0:
            self.set_task(UnitTask.ATTACK_RUN)
            self.unit.move(tile_center(*best))
            return

        self.on_idle()

    def durability(self) -> float:
        return self.unit.hit_points * self.DURABILITY_FACTOR

    def retreat(self, tx: int, ty: int) -> None:
        self.set_task(UnitTask.RETREATING)
        safest = self.manager.fields.safest_tile(tx, ty, self.MOVE_TILES)
        if safest is not None:
            self.unit.move(tile_center(*safest))

    def weapon_range(self, target: "Unit") -> int:
        unit_type = self.unit.type
        return unit_type.air_range if target.is_flyer else unit_type.ground_range

    def select_target(self) -> Optional["Unit"]:
        """Closest visible enemy inside weapon range, or None."""
        position = self.get_position()
        best = None
        best_distance = 0.0
        for enemy in self.manager.game.get_enemy_units():
            weapon_range = self.weapon_range(enemy)
            if weapon_range <= 0:
                continue
            distance = position.distance_to_point2(position_of(enemy))
            if distance > weapon_range:
                continue
            if best is None or distance < best_distance:
                best = enemy
                best_distance = distance
        return best

    def on_idle(self) -> None:
        self.set_task(UnitTask.IDLE)


class RangedAgent(CombatAgent):
    """Marines and vultures."""


class WraithAgent(CombatAgent):
    """Wraiths: cover more ground per move and scout when nothing needs shooting."""

    DURABILITY_FACTOR: float = 0.5
    MOVE_TILES: int = 6

    def on_idle(self) -> None:
        target: Optional[Point2] = self.manager.get_scouting_target(self.unit)
        if target is None:
            self.set_task(UnitTask.IDLE)
            return
        self.set_task(UnitTask.SCOUTING)
        self.move_along_path(target)
