# ===== BOT SETTINGS =====
# Name the bot announces itself with
BOT_NAME = "Talon"

# ===== PRODUCTION =====
# Minimum count of each unit type to keep built or queued.
# Keys are unit type names as the host reports them (see TalonBot/unit_types.py).
# The build manager queues one more of a type whenever built + queued falls
# below its minimum.
UNIT_MINIMUMS = {
    "Terran_SCV": 20,
    "Terran_Supply_Depot": 2,
    "Terran_Barracks": 1,
    "Terran_Refinery": 1,
    "Terran_Marine": 8,
}

# ===== ECONOMY =====
# Frames between sweeps that put idle miners back to work
IDLE_SWEEP_INTERVAL = 24

# Frame at which one mineral worker leaves to scout. Set to None to never scout.
SCOUT_AT_FRAME = 1440

# ===== DEBUG OVERLAY =====
# Debug modules switched on at game start. Any module can be toggled in game
# by typing its name; "all" toggles every module.
#   bases, buildingqueue, trainingqueue, unitminimums,
#   staticd, cooldowns, pathing, agents, tasks
ACTIVE_DEBUG_MODULES = [
    "staticd",
    "cooldowns",
    "pathing",
    "agents",
    "tasks",
]
