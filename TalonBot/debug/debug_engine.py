"""
DebugEngine — registry of debug modules and the drawing front-end.

Components register their modules at construction:

    engine.create_debug_module("bases").set_draw(lambda e: ...)

Once per frame the bot calls draw(); every active module draws through the
engine's primitives, which forward to the host overlay. Each frame has a
shape budget (MAX_SHAPES_PER_FRAME). Once it is spent the primitives raise
ShapeOverflow and draw() stops for the frame. The overflow is logged once
per run of consecutive overflowing frames.

Text typed into the game arrives at on_receive_command(line). The first
token selects a module by name, or every module with "all"; the rest of
the line is handed to the module.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING, Dict, List

from TalonBot.debug.debug_module import DebugModule
from TalonBot.errors import DuplicateRegistration, InvalidCommand, ShapeOverflow
from TalonBot.logger import get_logger

if TYPE_CHECKING:
    from TalonBot.host import Overlay

log = get_logger()

# Shapes the overlay accepts per frame
MAX_SHAPES_PER_FRAME: int = 4000

# Length (pixels) of each arrow-head stroke
ARROW_HEAD_SIZE: float = 8.0


class Color(Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    TEAL = "teal"
    ORANGE = "orange"
    YELLOW = "yellow"
    WHITE = "white"


class DebugEngine:

    def __init__(self, overlay: "Overlay") -> None:
        self.overlay = overlay
        self.modules: Dict[str, DebugModule] = {}
        self._shapes_this_frame: int = 0
        self._overflow_reported: bool = False

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def create_debug_module(self, name: str) -> DebugModule:
        if name in self.modules:
            raise DuplicateRegistration(f"Debug module {name!r} already registered")
        module = DebugModule(name, self)
        self.modules[name] = module
        return module

    def get_module(self, name: str) -> DebugModule:
        return self.modules[name]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def on_receive_command(self, line: str) -> None:
        """
        Dispatch one command line.

        With "all" the rest of the line goes to every module; it only fails
        if no module accepted it.
        """
        tokens: List[str] = line.split()
        if not tokens:
            raise InvalidCommand(line)

        head, rest = tokens[0], tokens[1:]
        if head == "all":
            accepted = 0
            for module in self.modules.values():
                try:
                    module.on_receive_command(rest, self)
                    accepted += 1
                except InvalidCommand:
                    continue
            if not accepted:
                raise InvalidCommand(line)
            return

        module = self.modules.get(head)
        if module is None:
            raise InvalidCommand(line)
        module.on_receive_command(rest, self)

    # ------------------------------------------------------------------
    # Frame drawing
    # ------------------------------------------------------------------

    def draw(self) -> None:
        self._shapes_this_frame = 0
        try:
            for module in self.modules.values():
                module.draw_if_active(self)
            self._overflow_reported = False
        except ShapeOverflow:
            if not self._overflow_reported:
                self._overflow_reported = True
                log.warning("Debug overlay shape budget (%d) exceeded", MAX_SHAPES_PER_FRAME)

    def _spend_shape(self) -> None:
        if self._shapes_this_frame >= MAX_SHAPES_PER_FRAME:
            raise ShapeOverflow()
        self._shapes_this_frame += 1

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def draw_text_map(self, x: int, y: int, text: str) -> None:
        self._spend_shape()
        self.overlay.draw_text_map(int(x), int(y), text)

    def draw_text_screen(self, x: int, y: int, text: str) -> None:
        self._spend_shape()
        self.overlay.draw_text_screen(int(x), int(y), text)

    def draw_circle_map(self, x: int, y: int, radius: int, color: Color, filled: bool = False) -> None:
        self._spend_shape()
        self.overlay.draw_circle_map(int(x), int(y), int(radius), color, filled)

    def draw_box_map(self, left: int, top: int, right: int, bottom: int,
                     color: Color, filled: bool = False) -> None:
        self._spend_shape()
        self.overlay.draw_box_map(int(left), int(top), int(right), int(bottom), color, filled)

    def draw_line_map(self, x1: int, y1: int, x2: int, y2: int, color: Color) -> None:
        self._spend_shape()
        self.overlay.draw_line_map(int(x1), int(y1), int(x2), int(y2), color)

    def draw_arrow_map(self, x1: int, y1: int, x2: int, y2: int, color: Color) -> None:
        """A line with two short head strokes at (x2, y2)."""
        self.draw_line_map(x1, y1, x2, y2, color)
        angle = math.atan2(y2 - y1, x2 - x1)
        for spread in (math.pi * 0.8, -math.pi * 0.8):
            hx = x2 + ARROW_HEAD_SIZE * math.cos(angle + spread)
            hy = y2 + ARROW_HEAD_SIZE * math.sin(angle + spread)
            self.draw_line_map(x2, y2, hx, hy, color)
