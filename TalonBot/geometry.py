"""Pixel / build-tile conversions on python-sc2 Point2."""

from __future__ import annotations

from sc2.position import Point2

# Pixels per build tile, in each dimension
TILE_SIZE: int = 32


def position_of(unit) -> Point2:
    """Pixel position of a host unit (or anything with x/y)."""
    return Point2((unit.x, unit.y))


def tile_of(unit) -> Point2:
    """Build tile under a unit's centre."""
    return Point2((int(unit.x) // TILE_SIZE, int(unit.y) // TILE_SIZE))


def tile_center(tx: int, ty: int) -> Point2:
    """Pixel centre of build tile (tx, ty)."""
    return Point2((tx * TILE_SIZE + TILE_SIZE // 2, ty * TILE_SIZE + TILE_SIZE // 2))
