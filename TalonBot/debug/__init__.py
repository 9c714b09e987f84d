"""
TalonBot.debug — in-game debug overlay modules.

Public API
----------
    from TalonBot.debug import DebugEngine, DebugModule, Color
"""

from TalonBot.debug.debug_engine import Color, DebugEngine
from TalonBot.debug.debug_module import DebugModule

__all__ = [
    "Color",
    "DebugEngine",
    "DebugModule",
]
