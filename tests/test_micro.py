"""Tests for unit agents and the micro manager."""

import pytest
from sc2.position import Point2

from TalonBot.construction import BuildingPlan
from TalonBot.errors import UnrecognizedUnitType
from TalonBot.geometry import tile_center
from TalonBot.micro.agent import PATH_REFRESH_FRAMES
from TalonBot.micro.combat_agents import RangedAgent, WraithAgent
from TalonBot.micro.unit_task import UnitTask
from TalonBot.micro.worker import Worker
from TalonBot.unit_types import UnitType

from conftest import ENEMY_MAIN, MAIN, NATURAL


def tile_px(t):
    return t * 32 + 16


class TestRegistry:
    @pytest.mark.parametrize("unit_type, agent_class", [
        (UnitType.TERRAN_SCV, Worker),
        (UnitType.TERRAN_MARINE, RangedAgent),
        (UnitType.TERRAN_VULTURE, RangedAgent),
        (UnitType.TERRAN_WRAITH, WraithAgent),
    ])
    def test_agent_variant_by_type(self, world, unit_type, agent_class):
        unit = world.game.add_unit(unit_type, 1024, 1200)
        agent = world.micro_manager.unit_created(unit)

        assert type(agent) is agent_class
        assert agent.manager is world.micro_manager
        assert world.micro_manager.get_agent_for_unit(unit) is agent
        assert world.micro_manager.get_units_by_type(unit_type) == [agent]

    def test_unrecognized_type(self, world):
        medic = world.game.add_unit(UnitType.TERRAN_MEDIC, 1024, 1200)
        with pytest.raises(UnrecognizedUnitType):
            world.micro_manager.unit_created(medic)
        assert world.micro_manager.get_agent_for_unit(medic) is None
        assert world.micro_manager.get_units_by_type(UnitType.TERRAN_MEDIC) == []

    def test_duplicate_keeps_first_agent(self, world):
        unit = world.game.add_unit(UnitType.TERRAN_MARINE, 1024, 1200)
        first = world.micro_manager.unit_created(unit)
        assert world.micro_manager.unit_created(unit) is first
        assert len(world.micro_manager.get_units_by_type(UnitType.TERRAN_MARINE)) == 1

    def test_worker_shared_with_base(self, world):
        worker = world.add_worker()
        assert world.main.workers[worker.id] is worker
        assert world.micro_manager.get_agent_for_unit(worker.unit) is worker

    def test_destroyed_leaves_both_maps(self, world):
        unit = world.game.add_unit(UnitType.TERRAN_MARINE, 1024, 1200)
        world.micro_manager.unit_created(unit)

        world.micro_manager.unit_destroyed(unit)

        assert world.micro_manager.get_agent_for_unit(unit) is None
        assert world.micro_manager.get_units_by_type(UnitType.TERRAN_MARINE) == []
        world.micro_manager.unit_destroyed(unit)


class TestScoutingTarget:
    def test_prefers_unclaimed_start_location(self, world):
        world.base_manager.bases[1].last_scouted = 500
        world.base_manager.bases[2].last_scouted = 0
        scout = world.game.add_unit(UnitType.TERRAN_SCV, 1024, 1200)

        assert world.micro_manager.get_scouting_target(scout) == ENEMY_MAIN

    def test_falls_back_to_least_recently_scouted(self, make_world):
        world = make_world(enemy_depot=True)
        main, enemy, natural = world.base_manager.bases
        main.last_scouted, enemy.last_scouted, natural.last_scouted = 5, 50, 100
        scout = world.game.add_unit(UnitType.TERRAN_MARINE, 1024, 1200)

        assert world.micro_manager.get_scouting_target(scout) == MAIN

    def test_ground_units_skip_unreachable_bases(self, make_world):
        world = make_world(unreachable=[(ENEMY_MAIN[0] // 32, ENEMY_MAIN[1] // 32)])
        main, enemy, natural = world.base_manager.bases
        main.last_scouted, natural.last_scouted = 10, 5
        scout = world.game.add_unit(UnitType.TERRAN_SCV, 1024, 1200)

        assert world.micro_manager.get_scouting_target(scout) == NATURAL

    def test_flyers_ignore_connectivity(self, make_world):
        world = make_world(unreachable=[(ENEMY_MAIN[0] // 32, ENEMY_MAIN[1] // 32)])
        wraith = world.game.add_unit(UnitType.TERRAN_WRAITH, 1024, 1200)

        assert world.micro_manager.get_scouting_target(wraith) == ENEMY_MAIN


class TestPathFollowing:
    def test_steps_through_waypoints(self, world):
        worker = world.add_worker()
        target = Point2((2000, 1100))

        worker.move_along_path(target)
        midpoint = worker.path[0]
        assert worker.unit.last_order == ("move", midpoint)
        assert worker.path_original_size == 2

        worker.unit.x, worker.unit.y = int(midpoint.x), int(midpoint.y)
        worker.move_along_path(target)

        assert worker.unit.last_order == ("move", target)
        assert len(world.path_finder.calls) == 1

    def test_stale_path_is_recomputed(self, world):
        worker = world.add_worker()
        target = Point2((2000, 1100))
        worker.move_along_path(target)

        world.game.frame_count += PATH_REFRESH_FRAMES + 1
        worker.move_along_path(target)

        assert len(world.path_finder.calls) == 2
        assert worker.path_start_frame == world.game.frame_count


class TestWorkerConstruction:
    def test_travels_then_builds(self, world):
        worker = world.add_worker()
        plan = BuildingPlan(UnitType.TERRAN_BARRACKS, 40, 40)
        worker.build(plan)

        worker.act()
        assert worker.task == UnitTask.CONSTRUCTING
        assert worker.unit.last_order[0] == "move"

        center = plan.get_center()
        worker.unit.x, worker.unit.y = int(center.x), int(center.y)
        worker.act()
        assert worker.unit.last_order == ("build", UnitType.TERRAN_BARRACKS, (40, 40))

        worker.unit.is_constructing = True
        orders = len(worker.unit.orders)
        worker.act()
        assert len(worker.unit.orders) == orders

    def test_lost_plan_sends_worker_back_to_mining(self, world):
        worker = world.add_worker()
        patch = world.main.assign_mineral(worker)
        worker.build(BuildingPlan(UnitType.TERRAN_BARRACKS, 40, 40))
        worker.build_plan = None

        worker.act()

        assert worker.task == UnitTask.MINERALS
        assert worker.current_resource is patch


class TestWorkerScouting:
    def test_scout_leaves_base_and_heads_out(self, world, check_gatherers):
        worker = world.add_worker()
        patch = world.main.assign_mineral(worker)

        worker.set_task_mining(UnitTask.SCOUTING, None)
        assert worker.base is None
        assert worker.id not in world.main.workers
        assert patch.get_num_gatherers() == 0

        world.micro_manager.on_frame()

        assert worker.task == UnitTask.SCOUTING
        assert worker.unit.last_order[0] == "move"
        assert world.path_finder.calls[-1][1] == ENEMY_MAIN
        check_gatherers(world)

    def test_arrival_marks_base_scouted(self, world):
        worker = world.add_worker()
        worker.set_task_mining(UnitTask.SCOUTING, None)
        worker.unit.x, worker.unit.y = ENEMY_MAIN[0] - 10, ENEMY_MAIN[1]
        world.game.frame_count = 900

        world.micro_manager.on_frame()

        assert world.base_manager.bases[1].last_scouted == 900

    def test_no_path_sends_scout_home(self, world):
        worker = world.add_worker()
        worker.set_task_mining(UnitTask.SCOUTING, None)
        world.path_finder.blocked = True

        world.micro_manager.on_frame()

        assert worker.task == UnitTask.MINERALS
        assert worker.base is world.main
        assert world.main.workers[worker.id] is worker
        assert worker.current_resource is not None


class TestCombatAgents:
    def place(self, world, unit_type, tx, ty, owner="self", **kwargs):
        return world.game.add_unit(unit_type, tile_px(tx), tile_px(ty), owner=owner, **kwargs)

    def test_fires_at_enemy_in_range(self, world):
        marine = world.micro_manager.unit_created(self.place(world, UnitType.TERRAN_MARINE, 50, 50))
        zergling = self.place(world, UnitType.ZERG_ZERGLING, 52, 50, owner="enemy")

        world.micro_manager.on_frame()

        assert marine.task == UnitTask.FIRING
        assert marine.unit.last_order == ("attack", zergling)

    def test_holds_fire_on_cooldown(self, world):
        unit = self.place(world, UnitType.TERRAN_MARINE, 50, 50, ground_weapon_cooldown=7)
        marine = world.micro_manager.unit_created(unit)
        self.place(world, UnitType.ZERG_ZERGLING, 52, 50, owner="enemy")

        world.micro_manager.on_frame()

        assert marine.task == UnitTask.FIRING
        assert marine.unit.orders == []

    def test_retreats_when_threat_exceeds_durability(self, world):
        unit = self.place(world, UnitType.TERRAN_MARINE, 50, 50, hit_points=10)
        marine = world.micro_manager.unit_created(unit)
        self.place(world, UnitType.ZERG_ZERGLING, 51, 50, owner="enemy")

        world.micro_manager.on_frame()

        assert marine.task == UnitTask.RETREATING
        action, destination = marine.unit.last_order
        assert action == "move"
        safest = world.micro_manager.fields.safest_tile(50, 50, marine.MOVE_TILES)
        assert destination == tile_center(*safest)

    def test_attack_run_toward_workers(self, world):
        marine = world.micro_manager.unit_created(self.place(world, UnitType.TERRAN_MARINE, 50, 50))
        self.place(world, UnitType.ZERG_DRONE, 58, 50, owner="enemy")

        world.micro_manager.on_frame()

        assert marine.task == UnitTask.ATTACK_RUN
        assert marine.unit.last_order[0] == "move"

    def test_idle_without_enemies(self, world):
        marine = world.micro_manager.unit_created(self.place(world, UnitType.TERRAN_MARINE, 50, 50))
        world.micro_manager.on_frame()
        assert marine.task == UnitTask.IDLE

    def test_wraith_targets_air_with_air_range(self, world):
        wraith = world.micro_manager.unit_created(self.place(world, UnitType.TERRAN_WRAITH, 50, 50))
        mutalisk = self.place(world, UnitType.ZERG_MUTALISK, 54, 50, owner="enemy")

        assert wraith.select_target() is mutalisk

    def test_idle_wraith_scouts(self, world):
        wraith = world.micro_manager.unit_created(self.place(world, UnitType.TERRAN_WRAITH, 50, 50))

        world.micro_manager.on_frame()

        assert wraith.task == UnitTask.SCOUTING
        source, destination, is_flyer = world.path_finder.calls[-1]
        assert destination == ENEMY_MAIN
        assert is_flyer

    def test_unreachable_scouting_target_only_drops_the_action(self, world):
        wraith = world.micro_manager.unit_created(self.place(world, UnitType.TERRAN_WRAITH, 50, 50))
        world.path_finder.blocked = True

        world.micro_manager.on_frame()

        assert wraith.unit.orders == []


class TestMicroDebugModules:
    def test_agent_modules_draw(self, world):
        world.add_worker()
        world.micro_manager.unit_created(
            world.game.add_unit(UnitType.TERRAN_MARINE, 1100, 1200, ground_weapon_cooldown=5))
        world.game.add_unit(UnitType.PROTOSS_PHOTON_CANNON, 2000, 2000, owner="enemy")
        world.micro_manager.on_frame()
        for name in ("staticd", "cooldowns", "pathing", "agents", "tasks"):
            world.debug_engine.get_module(name).set_active(True)

        world.debug_engine.draw()

        texts = [c[3] for c in world.overlay.calls if c[0] == "text_map"]
        assert "Worker" in texts
        assert "RangedAgent" in texts
        assert "Minerals" in texts
        circles = [c for c in world.overlay.calls if c[0] == "circle"]
        assert any(c[3] == 224 for c in circles)
