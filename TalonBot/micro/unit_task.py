from enum import Enum, auto


class UnitTask(Enum):
    IDLE = auto()
    MINERALS = auto()
    GAS = auto()
    CONSTRUCTING = auto()
    SCOUTING = auto()
    ATTACK_RUN = auto()
    FIRING = auto()
    RETREATING = auto()
