"""
DebugModule — one named node in the debug overlay tree.

A module draws one piece of information about the component that created
it. It is switched on and off from the in-game text channel:

    bases                 toggle the "bases" module (the default command)
    bases workers         run the "workers" command, or descend into the
                          "workers" submodule, of "bases"
    all                   toggle every registered module

Each module keeps
  - an ``active`` flag; only active modules (and their submodules) draw
  - a command table; the None key is the default command, which toggles
    ``active`` unless replaced
  - nested submodules that receive the rest of the command line
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from TalonBot.errors import DuplicateRegistration, InvalidCommand

if TYPE_CHECKING:
    from TalonBot.debug.debug_engine import DebugEngine

# (remaining tokens, engine) -> None
CommandFunction = Callable[[List[str], "DebugEngine"], None]
# engine -> None
DrawFunction = Callable[["DebugEngine"], None]

_LAST_NONE = 0
_LAST_COMMAND = 1
_LAST_SUBMODULE = 2


class DebugModule:

    def __init__(self, name: str, engine: "DebugEngine") -> None:
        self.name = name
        self.engine = engine
        self.active: bool = False

        self._commands: Dict[Optional[str], CommandFunction] = {None: self._toggle}
        self._submodules: Dict[str, "DebugModule"] = {}
        self._draw: DrawFunction = lambda engine: None

        self._last_added: Optional[str] = None
        self._last_added_to: int = _LAST_NONE

    # ------------------------------------------------------------------
    # Building the tree
    # ------------------------------------------------------------------

    def add_command(self, command: Optional[str], action: CommandFunction) -> "DebugModule":
        # The built-in toggle may be replaced once; any other repeat is an error
        if command in self._commands and not (command is None and self._commands[None] == self._toggle):
            raise DuplicateRegistration(f"Command {command!r} already registered on {self.name!r}")
        self._commands[command] = action
        self._last_added = command
        self._last_added_to = _LAST_COMMAND
        return self

    def add_submodule(self, name: str) -> "DebugModule":
        if name in self._submodules:
            raise DuplicateRegistration(f"Submodule {name!r} already registered on {self.name!r}")
        module = DebugModule(name, self.engine)
        self._submodules[name] = module
        self._last_added = name
        self._last_added_to = _LAST_SUBMODULE
        return module

    def add_alias(self, alias: str) -> "DebugModule":
        """Register ``alias`` for the command or submodule added last."""
        if self._last_added_to == _LAST_COMMAND:
            self.add_command(alias, self._commands[self._last_added])
        elif self._last_added_to == _LAST_SUBMODULE:
            if alias in self._submodules:
                raise DuplicateRegistration(f"Submodule {alias!r} already registered on {self.name!r}")
            self._submodules[alias] = self._submodules[self._last_added]
        return self

    def set_draw(self, draw: DrawFunction) -> "DebugModule":
        self._draw = draw
        return self

    def set_active(self, active: bool) -> "DebugModule":
        self.active = active
        return self

    def get_submodule(self, name: str) -> Optional["DebugModule"]:
        return self._submodules.get(name)

    # ------------------------------------------------------------------
    # Runtime
    # ------------------------------------------------------------------

    def draw_if_active(self, engine: "DebugEngine") -> None:
        if not self.active:
            return
        for submodule in self._submodules.values():
            submodule.draw_if_active(engine)
        self._draw(engine)

    def on_receive_command(self, command: List[str], engine: "DebugEngine") -> None:
        """
        Handle the part of a command line after this module's name.

        Raises InvalidCommand if the first token names neither a command
        nor a submodule.
        """
        head = command[0] if command else None
        if head in self._commands:
            self._commands[head](command, engine)
            return
        if head in self._submodules:
            self._submodules[head].on_receive_command(command[1:], engine)
            return
        raise InvalidCommand(" ".join([self.name] + command))

    def _toggle(self, command: List[str], engine: "DebugEngine") -> None:
        self.active = not self.active

    def __repr__(self) -> str:
        return f"DebugModule({self.name!r} active={self.active})"
