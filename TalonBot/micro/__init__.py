"""
TalonBot.micro — per-unit agents and the per-frame micro loop.

Public API
----------
    from TalonBot.micro.micro_manager import MicroManager
    from TalonBot.micro.field_map import FieldMap
    from TalonBot.micro.agent import UnitAgent
    from TalonBot.micro.combat_agents import RangedAgent, WraithAgent
    from TalonBot.micro.worker import Worker
    from TalonBot.micro.unit_task import UnitTask

Nothing is re-exported here: the economy package imports UnitTask while the
micro manager imports the economy package, so eager imports would cycle.
"""
