"""
Error kinds raised inside the decision core.

Recoverable kinds (NoPathFound, Supersaturated, PlacementExhausted,
InvalidCommand, UnrecognizedUnitType) are caught and logged close to where
they happen. DuplicateRegistration marks a programming error and is never
caught.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from TalonBot.unit_types import UnitType


class TalonError(Exception):
    """Base class for every error the bot raises on purpose."""


class NoPathFound(TalonError):
    """The path finder has no walkable route between two points."""

    def __init__(self, source=None, destination=None) -> None:
        self.source = source
        self.destination = destination
        super().__init__(f"No path from {source} to {destination}")


class PlacementExhausted(TalonError):
    """The placement search reached its stop distance without a legal tile."""

    def __init__(self, unit_type: "UnitType", stop_dist: int) -> None:
        self.unit_type = unit_type
        self.stop_dist = stop_dist
        super().__init__(
            f"No build tile for {unit_type.name} within {stop_dist} tiles of the main base"
        )


class Supersaturated(TalonError):
    """Every mineral patch at the base already has the maximum gatherers."""

    def __init__(self, base=None) -> None:
        self.base = base
        super().__init__(f"Base {base} is supersaturated")


class UnrecognizedUnitType(TalonError):
    """No agent variant exists for this unit type."""

    def __init__(self, unit_type: Optional["UnitType"]) -> None:
        self.unit_type = unit_type
        name = getattr(unit_type, "name", unit_type)
        super().__init__(f"Unrecognized unit type: {name}")


class InvalidCommand(TalonError):
    """A debug command line matched no module, submodule or command."""

    def __init__(self, command=None) -> None:
        self.command = command
        super().__init__(f"Invalid debug command: {command}")


class DuplicateRegistration(TalonError):
    """A debug module or command name was registered twice."""


class ShapeOverflow(TalonError):
    """The debug overlay shape budget for this frame is used up."""
