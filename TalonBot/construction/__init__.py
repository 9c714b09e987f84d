"""
TalonBot.construction — building plans, queues and placement.

Public API
----------
    from TalonBot.construction import BuildManager, BuildingPlan
"""

from TalonBot.construction.build_manager import BuildManager
from TalonBot.construction.building_plan import BuildingPlan

__all__ = [
    "BuildManager",
    "BuildingPlan",
]
