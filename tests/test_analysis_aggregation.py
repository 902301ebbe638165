"""Tests for stakemap.analysis.aggregation — per-respondent and consensus views."""

from __future__ import annotations

import math

import pytest

from stakemap.analysis.aggregation import aggregate_global, aggregate_per_respondent
from stakemap.board import BoardGeometry
from stakemap.models import (
    Coordinates,
    InterviewSession,
    MapType,
    Placement,
    ProjectConfig,
)

CENTER = 200.0  # board fixture centre


def _at(distance: float, angle_deg: float = 0.0) -> Coordinates:
    """Point at a normalised *distance* on the 400 px fixture board.

    Angles are counter-clockwise from the positive x axis, screen y down.
    """
    r = distance / 100 * 200
    a = math.radians(angle_deg)
    return Coordinates(x=CENTER + r * math.cos(a), y=CENTER - r * math.sin(a))


def _session(
    sid: str,
    respondent: str,
    rel: dict[str, Coordinates | None] | None = None,
    cen: dict[str, Coordinates | None] | None = None,
) -> InterviewSession:
    return InterviewSession(
        session_id=sid,
        respondent_id=respondent,
        relationship_map=[Placement(id=t, position=p) for t, p in (rel or {}).items()],
        centrality_map=[Placement(id=t, position=p) for t, p in (cen or {}).items()],
    )


# ---------------------------------------------------------------------------
# aggregate_per_respondent
# ---------------------------------------------------------------------------


class TestAggregatePerRespondent:

    def test_no_sessions(self, config: ProjectConfig, board: BoardGeometry) -> None:
        result = aggregate_per_respondent([], MapType.RELATIONSHIP, config, board)
        assert list(result) == ["A", "B", "C", "D"]
        assert all(targets == {} for targets in result.values())

    def test_two_sessions_average_distance(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        """A places B at 25 and 75 → mean 50, std dev 25, mean 100 px out."""
        sessions = [
            _session("s1", "A", rel={"B": _at(25, 0)}),
            _session("s2", "A", rel={"B": _at(75, 90)}),
        ]
        result = aggregate_per_respondent(sessions, MapType.RELATIONSHIP, config, board)
        point = result["A"]["B"]
        assert point.count == 2
        assert point.mean_score == 50
        assert point.std_dev == pytest.approx(25.0)
        assert point.mean_distance == pytest.approx(50.0)

        vx, vy = point.mean.x - CENTER, point.mean.y - CENTER
        assert math.hypot(vx, vy) == pytest.approx(100)
        # Same direction as the raw centroid (225, 125)
        assert math.atan2(vy, vx) == pytest.approx(math.atan2(125 - CENTER, 225 - CENTER))

    def test_absent_placement_not_counted(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        sessions = [
            _session("s1", "A", rel={"C": _at(40)}),
            _session("s2", "A", rel={"C": None}),
        ]
        point = aggregate_per_respondent(sessions, MapType.RELATIONSHIP, config, board)["A"]["C"]
        assert point.count == 1
        assert len(point.points) == 1
        assert point.mean_score == 40
        assert point.std_dev == 0.0

    def test_unplaced_target_omitted(self, config: ProjectConfig, board: BoardGeometry) -> None:
        sessions = [_session("s1", "A", rel={"B": _at(10), "D": None})]
        result = aggregate_per_respondent(sessions, MapType.RELATIONSHIP, config, board)
        for targets in result.values():
            assert "D" not in targets
        assert list(result["A"]) == ["B"]

    def test_groups_by_respondent(self, config: ProjectConfig, board: BoardGeometry) -> None:
        sessions = [
            _session("s1", "A", rel={"C": _at(20)}),
            _session("s2", "B", rel={"C": _at(80)}),
        ]
        result = aggregate_per_respondent(sessions, MapType.RELATIONSHIP, config, board)
        assert result["A"]["C"].mean_score == 20
        assert result["B"]["C"].mean_score == 80
        assert result["A"]["C"].count == 1

    def test_centrality_mode_inverts_score(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        sessions = [_session("s1", "A", rel={"B": _at(30)}, cen={"B": _at(30)})]
        rel = aggregate_per_respondent(sessions, MapType.RELATIONSHIP, config, board)
        cen = aggregate_per_respondent(sessions, MapType.CENTRALITY, config, board)
        assert rel["A"]["B"].mean_score == 30
        assert cen["A"]["B"].mean_score == 70

    def test_mode_selects_the_right_map(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        sessions = [_session("s1", "A", rel={"B": _at(30)})]
        cen = aggregate_per_respondent(sessions, MapType.CENTRALITY, config, board)
        assert cen["A"] == {}

    def test_target_order_follows_roster(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        sessions = [_session("s1", "A", rel={"D": _at(10), "B": _at(20), "C": _at(30)})]
        result = aggregate_per_respondent(sessions, MapType.RELATIONSHIP, config, board)
        assert list(result["A"]) == ["B", "C", "D"]

    def test_unknown_respondent_skipped(
        self, config: ProjectConfig, board: BoardGeometry, caplog: pytest.LogCaptureFixture
    ) -> None:
        sessions = [_session("s1", "ghost", rel={"B": _at(10)})]
        with caplog.at_level("WARNING"):
            result = aggregate_per_respondent(sessions, MapType.RELATIONSHIP, config, board)
        assert "ghost" not in result
        assert all(targets == {} for targets in result.values())
        assert "ghost" in caplog.text

    def test_unknown_target_skipped(self, config: ProjectConfig, board: BoardGeometry) -> None:
        sessions = [_session("s1", "A", rel={"Z": _at(10), "B": _at(20)})]
        result = aggregate_per_respondent(sessions, MapType.RELATIONSHIP, config, board)
        assert list(result["A"]) == ["B"]

    def test_malformed_position_treated_as_unplaced(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        session = InterviewSession.model_validate(
            {
                "sessionId": "s1",
                "respondentId": "A",
                "relationshipMap": [
                    {"id": "B", "position": {"x": "left", "y": 10}},
                    {"id": "C", "position": {"x": 250}},
                    {"id": "D", "position": {"x": 250, "y": 200}},
                ],
            }
        )
        result = aggregate_per_respondent([session], MapType.RELATIONSHIP, config, board)
        assert list(result["A"]) == ["D"]

    def test_non_finite_position_skipped(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        session = _session("s1", "A", rel={"B": Coordinates(x=float("nan"), y=200)})
        result = aggregate_per_respondent([session], MapType.RELATIONSHIP, config, board)
        assert result["A"] == {}

    def test_self_placement_is_aggregated(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        """Excluding self-placements is the caller's job, not the aggregator's."""
        sessions = [_session("s1", "A", rel={"A": _at(0)})]
        result = aggregate_per_respondent(sessions, MapType.RELATIONSHIP, config, board)
        assert result["A"]["A"].count == 1

    def test_count_matches_points(self, config: ProjectConfig, board: BoardGeometry) -> None:
        sessions = [
            _session(f"s{i}", "A", rel={"B": _at(10 * i, 30 * i), "C": _at(5 * i)})
            for i in range(1, 6)
        ]
        result = aggregate_per_respondent(sessions, MapType.RELATIONSHIP, config, board)
        for point in result["A"].values():
            assert point.count == len(point.points) == 5

    def test_idempotent(self, config: ProjectConfig, board: BoardGeometry) -> None:
        sessions = [
            _session("s1", "A", rel={"B": _at(25, 10), "C": _at(60, 200)}),
            _session("s2", "B", rel={"A": _at(70, 300)}),
            _session("s3", "A", rel={"B": _at(35, 80)}),
        ]
        first = aggregate_per_respondent(sessions, MapType.RELATIONSHIP, config, board)
        second = aggregate_per_respondent(sessions, MapType.RELATIONSHIP, config, board)
        assert first == second
        assert [list(t) for t in first.values()] == [list(t) for t in second.values()]

    def test_output_does_not_alias_input(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        session = _session("s1", "A", rel={"B": _at(25)})
        point = aggregate_per_respondent([session], MapType.RELATIONSHIP, config, board)["A"]["B"]
        original = session.relationship_map[0].position
        assert point.points[0] == original
        assert point.points[0] is not original


# ---------------------------------------------------------------------------
# aggregate_global
# ---------------------------------------------------------------------------


class TestAggregateGlobal:

    def test_no_sessions(self, config: ProjectConfig, board: BoardGeometry) -> None:
        assert aggregate_global([], MapType.CENTRALITY, config, board) == {}

    def test_merges_across_respondents(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        sessions = [
            _session("s1", "A", cen={"C": _at(20, 45)}),
            _session("s2", "B", cen={"C": _at(40, 45)}),
            _session("s3", "D", cen={"C": _at(60, 45)}),
        ]
        point = aggregate_global(sessions, MapType.CENTRALITY, config, board)["C"]
        assert point.count == 3
        assert point.mean_distance == pytest.approx(40)
        assert point.mean_score == 60  # 100 - 40
        assert point.std_dev == pytest.approx(16.3)  # sqrt(800/3) = 16.33

    def test_relationship_mode_not_inverted(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        sessions = [_session("s1", "A", rel={"B": _at(30)})]
        assert aggregate_global(sessions, MapType.RELATIONSHIP, config, board)["B"].mean_score == 30

    def test_never_placed_target_omitted(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        sessions = [
            _session("s1", "A", cen={"B": _at(30), "D": None}),
            _session("s2", "B", cen={"C": _at(50), "D": None}),
        ]
        result = aggregate_global(sessions, MapType.CENTRALITY, config, board)
        assert "D" not in result
        assert list(result) == ["B", "C"]

    def test_respondent_identity_ignored(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        """Sessions from respondents outside the roster still count in the consensus."""
        sessions = [_session("s1", "observer", cen={"A": _at(10)})]
        assert aggregate_global(sessions, MapType.CENTRALITY, config, board)["A"].count == 1

    def test_mean_rounded_half_up(self, config: ProjectConfig, board: BoardGeometry) -> None:
        sessions = [
            _session("s1", "A", rel={"B": _at(20)}),
            _session("s2", "C", rel={"B": _at(25)}),
        ]
        point = aggregate_global(sessions, MapType.RELATIONSHIP, config, board)["B"]
        assert point.mean_distance == pytest.approx(22.5)
        assert point.mean_score == 23

    def test_spread_points_keep_average_distance(
        self, config: ProjectConfig, board: BoardGeometry
    ) -> None:
        """Four placements at 50, one on each axis: mean stays 100 px out."""
        sessions = [
            _session(f"s{i}", "A", cen={"B": _at(50, angle)})
            for i, angle in enumerate((0, 90, 180, 270))
        ]
        point = aggregate_global(sessions, MapType.CENTRALITY, config, board)["B"]
        assert point.mean.x == pytest.approx(CENTER)
        assert point.mean.y == pytest.approx(CENTER - 100)
        assert point.mean_score == 50
        assert point.std_dev == 0.0

    def test_idempotent(self, config: ProjectConfig, board: BoardGeometry) -> None:
        sessions = [
            _session("s1", "A", cen={"B": _at(25, 10), "C": _at(60, 200)}),
            _session("s2", "B", cen={"A": _at(70, 300), "C": _at(10, 10)}),
        ]
        first = aggregate_global(sessions, MapType.CENTRALITY, config, board)
        second = aggregate_global(sessions, MapType.CENTRALITY, config, board)
        assert first == second
        assert list(first) == list(second)
