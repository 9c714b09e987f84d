"""
TalonBot.economy — bases, resources and worker saturation.

Public API
----------
    from TalonBot.economy import (
        Base,
        BaseOwner,
        BaseManager,
        MineralResource,
        GasResource,
    )
"""

from TalonBot.economy.base import Base, BaseOwner
from TalonBot.economy.base_manager import BaseManager
from TalonBot.economy.resource import GasResource, MineralResource, Resource

__all__ = [
    "Base",
    "BaseOwner",
    "BaseManager",
    "GasResource",
    "MineralResource",
    "Resource",
]
