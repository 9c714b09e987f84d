"""
Field Map — per-build-tile target and threat fields.

Two float grids of shape (map_width + 1, map_height + 1), indexed [x, y] in
build tiles, are rebuilt from scratch every frame from the visible enemies:

  - target: how attractive the tiles around an enemy are to attack.
            Only enemy workers contribute (value 1), falling off as
            1 / (distance + 1) over a radius of TARGET_RADIUS tiles.
  - threat: how dangerous the tiles around an enemy are.
            Every enemy contributes THREAT_VALUE * max(1 - d / r, 0) with
            r = air weapon range in tiles + THREAT_BASE_RADIUS.

Each contribution covers the L1 ball of radius r around the enemy tile
(x in [ex - r, ex + r], y within the remaining radius), clamped to the map.
Both grids are allocated once and zeroed in place before every rebuild.

Agents query the grids through target_at / threat_at and pick movement
goals with best_target_tile / safest_tile.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

import numpy as np

from TalonBot.geometry import TILE_SIZE

# Radius (tiles) of the target contribution around each enemy
TARGET_RADIUS: int = 10

# Peak threat contributed by a single enemy on its own tile
THREAT_VALUE: float = 20.0

# Threat radius (tiles) added on top of the enemy's air weapon range
THREAT_BASE_RADIUS: int = 10


class FieldMap:
    """
    Maintains the target and threat grids over the build-tile map.
    Call update(enemies) once per frame before any agent acts.
    """

    def __init__(self, map_width: int, map_height: int) -> None:
        self.map_width = map_width
        self.map_height = map_height

        self.target = np.zeros((map_width + 1, map_height + 1), dtype=np.float64)
        self.threat = np.zeros((map_width + 1, map_height + 1), dtype=np.float64)

    # ------------------------------------------------------------------ #
    # Rebuild
    # ------------------------------------------------------------------ #

    def update(self, enemies: Iterable) -> None:
        """Zero both grids, then add every enemy's contributions."""
        self.target.fill(0.0)
        self.threat.fill(0.0)

        for unit in enemies:
            x = int(unit.x) // TILE_SIZE
            y = int(unit.y) // TILE_SIZE
            unit_type = unit.type

            target_value = 1.0 if unit_type.is_worker else 0.0
            if target_value:
                self._deposit_target(x, y, TARGET_RADIUS, target_value)

            radius = unit_type.air_range // TILE_SIZE + THREAT_BASE_RADIUS
            self._deposit_threat(x, y, radius, THREAT_VALUE)

    def _disc(self, x: int, y: int, radius: int):
        """
        Window of the L1 ball of ``radius`` around (x, y), clamped to the map.

        Returns (x-slice, y-slice, euclidean distances, L1 mask) or None if the
        ball lies entirely off the map.
        """
        x0 = max(x - radius, 0)
        x1 = min(x + radius, self.map_width)
        y0 = max(y - radius, 0)
        y1 = min(y + radius, self.map_height)
        if x0 > x1 or y0 > y1:
            return None

        dx = np.arange(x0, x1 + 1)[:, None] - x
        dy = np.arange(y0, y1 + 1)[None, :] - y
        mask = (np.abs(dx) + np.abs(dy)) <= radius
        dist = np.hypot(dx, dy)
        return slice(x0, x1 + 1), slice(y0, y1 + 1), dist, mask

    def _deposit_target(self, x: int, y: int, radius: int, value: float) -> None:
        window = self._disc(x, y, radius)
        if window is None:
            return
        xs, ys, dist, mask = window
        self.target[xs, ys] += np.where(mask, value / (dist + 1.0), 0.0)

    def _deposit_threat(self, x: int, y: int, radius: int, value: float) -> None:
        window = self._disc(x, y, radius)
        if window is None or radius <= 0:
            return
        xs, ys, dist, mask = window
        falloff = np.maximum(1.0 - dist / radius, 0.0)
        self.threat[xs, ys] += np.where(mask, value * falloff, 0.0)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def in_bounds(self, tx: int, ty: int) -> bool:
        return 0 <= tx <= self.map_width and 0 <= ty <= self.map_height

    def target_at(self, tx: int, ty: int) -> float:
        if not self.in_bounds(tx, ty):
            return 0.0
        return float(self.target[tx, ty])

    def threat_at(self, tx: int, ty: int) -> float:
        if not self.in_bounds(tx, ty):
            return 0.0
        return float(self.threat[tx, ty])

    def best_target_tile(self, tx: int, ty: int, reach: int) -> Optional[Tuple[int, int]]:
        """
        Tile within ``reach`` tiles of (tx, ty) maximising
        target / (1 + threat); ties go to the closer tile.
        """
        return self._pick(
            tx, ty, reach,
            lambda xs, ys: self.target[xs, ys] / (1.0 + self.threat[xs, ys]),
            maximise=True,
        )

    def safest_tile(self, tx: int, ty: int, reach: int) -> Optional[Tuple[int, int]]:
        """Tile within ``reach`` tiles of (tx, ty) with the least threat."""
        return self._pick(tx, ty, reach, lambda xs, ys: self.threat[xs, ys], maximise=False)

    def _pick(self, tx, ty, reach, score_window, maximise):
        # score_window(xs, ys) scores only the slice around (tx, ty)
        x0, x1 = max(tx - reach, 0), min(tx + reach, self.map_width)
        y0, y1 = max(ty - reach, 0), min(ty + reach, self.map_height)
        if x0 > x1 or y0 > y1:
            return None

        dx = np.arange(x0, x1 + 1)[:, None] - tx
        dy = np.arange(y0, y1 + 1)[None, :] - ty
        dist = np.hypot(dx, dy)
        reachable = dist <= reach

        score = score_window(slice(x0, x1 + 1), slice(y0, y1 + 1))
        if maximise:
            score = -score
        # Primary key score, secondary key distance
        keys = np.where(reachable, score, np.inf)
        flat_order = np.lexsort((dist.ravel(), keys.ravel()))
        best = int(flat_order[0])
        if not np.isfinite(keys.ravel()[best]):
            return None
        bx, by = np.unravel_index(best, keys.shape)
        return x0 + int(bx), y0 + int(by)
