"""Tests for the per-tile target and threat fields."""

import numpy as np
import pytest

from TalonBot.micro.field_map import FieldMap
from TalonBot.unit_types import UnitType


def at_tile(game, unit_type, tx, ty):
    return game.add_unit(unit_type, tx * 32 + 16, ty * 32 + 16, owner="enemy")


@pytest.fixture
def fields():
    return FieldMap(128, 128)


class TestThreat:
    def test_disc_shape(self, game, fields):
        zergling = at_tile(game, UnitType.ZERG_ZERGLING, 50, 50)
        fields.update([zergling])

        assert fields.threat[50, 50] == pytest.approx(20.0)
        assert fields.threat[60, 50] == 0.0
        assert fields.threat[50, 45] > 0
        assert fields.threat[50, 45] == pytest.approx(10.0)

    def test_l1_ball_bounds_the_disc(self, game, fields):
        fields.update([at_tile(game, UnitType.ZERG_ZERGLING, 50, 50)])
        # Euclidean distance ~9.9 but outside the L1 ball of radius 10
        assert fields.threat[57, 57] == 0.0
        assert fields.threat[55, 55] > 0.0

    def test_air_range_widens_radius(self, game, fields):
        fields.update([at_tile(game, UnitType.ZERG_SPORE_COLONY, 50, 50)])
        # 224 px air range = 7 tiles, radius 17
        assert fields.threat[62, 50] > 0.0
        assert fields.threat[67, 50] == 0.0

    def test_contributions_add_up(self, game, fields):
        fields.update([
            at_tile(game, UnitType.ZERG_ZERGLING, 50, 50),
            at_tile(game, UnitType.ZERG_ZERGLING, 50, 50),
        ])
        assert fields.threat[50, 50] == pytest.approx(40.0)

    def test_clamped_at_map_edge(self, game, fields):
        fields.update([at_tile(game, UnitType.ZERG_ZERGLING, 0, 0)])
        assert fields.threat[0, 0] == pytest.approx(20.0)
        assert fields.threat_at(-1, 0) == 0.0

    def test_last_row_and_column_are_on_the_map(self, game, fields):
        fields.update([at_tile(game, UnitType.ZERG_ZERGLING, 128, 128)])
        assert fields.threat.shape == (129, 129)
        assert fields.threat[128, 128] == pytest.approx(20.0)


class TestTarget:
    def test_workers_attract(self, game, fields):
        fields.update([at_tile(game, UnitType.ZERG_DRONE, 50, 50)])

        assert fields.target[50, 50] == pytest.approx(1.0)
        assert fields.target[53, 50] == pytest.approx(0.25)
        assert fields.target[61, 50] == 0.0

    def test_non_workers_do_not_attract(self, game, fields):
        fields.update([at_tile(game, UnitType.ZERG_HYDRALISK, 50, 50)])
        assert not fields.target.any()
        assert fields.threat.any()


class TestRebuild:
    def test_no_enemies_means_zero_fields(self, fields):
        fields.update([])
        assert not fields.target.any()
        assert not fields.threat.any()

    def test_rebuild_forgets_last_frame(self, game, fields):
        fields.update([at_tile(game, UnitType.ZERG_DRONE, 20, 20)])
        fields.update([])
        assert not fields.target.any()
        assert not fields.threat.any()

    def test_fields_never_negative(self, game, fields):
        rng = np.random.default_rng(7)
        types = [UnitType.ZERG_DRONE, UnitType.ZERG_ZERGLING, UnitType.PROTOSS_DRAGOON,
                 UnitType.PROTOSS_PHOTON_CANNON, UnitType.ZERG_MUTALISK]
        enemies = [
            at_tile(game, types[i % len(types)], int(rng.integers(0, 129)), int(rng.integers(0, 129)))
            for i in range(25)
        ]
        fields.update(enemies)
        assert (fields.target >= 0).all()
        assert (fields.threat >= 0).all()

    def test_grids_are_reused(self, game, fields):
        target, threat = fields.target, fields.threat
        fields.update([at_tile(game, UnitType.ZERG_DRONE, 20, 20)])
        assert fields.target is target
        assert fields.threat is threat


class TestQueries:
    def test_safest_tile_moves_away(self, game, fields):
        fields.update([at_tile(game, UnitType.ZERG_ZERGLING, 50, 50)])

        tile = fields.safest_tile(50, 50, 4)

        assert tile in {(46, 50), (54, 50), (50, 46), (50, 54)}
        assert fields.threat_at(*tile) == pytest.approx(12.0)

    def test_best_target_tile_stays_in_reach(self, game, fields):
        fields.update([at_tile(game, UnitType.ZERG_DRONE, 58, 50)])

        tile = fields.best_target_tile(50, 50, 4)

        assert tile is not None
        assert np.hypot(tile[0] - 50, tile[1] - 50) <= 4
        assert fields.target_at(*tile) > 0

    def test_best_target_tile_prefers_closer_on_ties(self, fields):
        tile = fields.best_target_tile(50, 50, 4)
        assert tile == (50, 50)

    @pytest.mark.parametrize("tx, ty", [(50, 50), (1, 1), (124, 3), (125, 125)])
    def test_best_target_tile_agrees_with_whole_map_score(self, game, fields, tx, ty):
        fields.update([
            at_tile(game, UnitType.ZERG_DRONE, tx + 3, ty),
            at_tile(game, UnitType.ZERG_ZERGLING, tx, ty + 2),
        ])
        reach = 4

        tile = fields.best_target_tile(tx, ty, reach)

        score = fields.target / (1.0 + fields.threat)
        xs, ys = np.indices(score.shape)
        reachable = np.hypot(xs - tx, ys - ty) <= reach
        assert score[tile] == pytest.approx(score[reachable].max())
