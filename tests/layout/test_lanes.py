"""Narrow-mode lane assignment tests."""

import pytest

from carelog.layout.lanes import LaneAssigner

from tests.fixtures import point_item, span_item


@pytest.fixture
def assigner():
    return LaneAssigner(proximity_minutes=60)


class TestLaneAssigner:

    def test_close_dots_get_separate_lanes(self, assigner):
        lanes = assigner.lanes_for([
            point_item("a", 480), point_item("b", 500), point_item("c", 530), point_item("d", 600)
        ])
        assert lanes == {"a": 0, "b": 1, "c": 2, "d": 0}

    def test_exactly_one_radius_apart_share_lane(self, assigner):
        lanes = assigner.lanes_for([point_item("a", 480), point_item("b", 540)])
        assert lanes == {"a": 0, "b": 0}

    def test_reuses_lowest_free_lane(self, assigner):
        lanes = assigner.lanes_for([
            point_item("a", 0), point_item("b", 10), point_item("c", 65)
        ])
        # c is 65 from a (lane 0 free) even though lane 1 holds b at 55 away
        assert lanes["c"] == 0

    def test_spans_are_left_in_lane_zero(self, assigner):
        items = assigner.assign([span_item("s", 0, 600), point_item("a", 10), point_item("b", 20)])
        assert [(i.event_id, i.lane) for i in items] == [("s", 0), ("a", 0), ("b", 1)]

    def test_order_independent(self, assigner):
        items = [point_item("a", 480), point_item("b", 500), point_item("c", 530)]
        assert assigner.lanes_for(items) == assigner.lanes_for(list(reversed(items)))
