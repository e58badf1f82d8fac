"""Unit tests for subject validation helpers and cycle detection."""

import pytest

from app.exceptions import InvalidInputError
from app.services.subject_service import (
    find_cycle_edge,
    validate_difficulty,
    validate_total_hours,
)


class TestFindCycleEdge:
    """Edges map a subject to the subjects it requires."""

    def test_no_edges_no_cycle(self):
        assert find_cycle_edge(1, [2, 3], {}) is None

    def test_self_reference_is_a_cycle(self):
        assert find_cycle_edge(1, [1], {}) == 1

    def test_direct_back_edge(self):
        # 2 already requires 1, so 1 -> 2 closes a loop
        assert find_cycle_edge(1, [2], {2: {1}}) == 2

    def test_transitive_back_edge(self):
        edges = {2: {3}, 3: {4}, 4: {1}}
        assert find_cycle_edge(1, [2], edges) == 2

    def test_reports_first_offending_prerequisite(self):
        edges = {3: {1}}
        assert find_cycle_edge(1, [2, 3], edges) == 3

    def test_diamond_is_not_a_cycle(self):
        edges = {2: {4}, 3: {4}}
        assert find_cycle_edge(1, [2, 3], edges) is None

    def test_existing_unrelated_cycle_terminates(self):
        edges = {2: {3}, 3: {2}}
        assert find_cycle_edge(1, [2], edges) is None


class TestValidators:
    @pytest.mark.parametrize("level", [1, 3, 5])
    def test_difficulty_in_range(self, level):
        validate_difficulty(level)

    @pytest.mark.parametrize("level", [0, 6, None])
    def test_difficulty_out_of_range(self, level):
        with pytest.raises(InvalidInputError, match="between 1 and 5"):
            validate_difficulty(level)

    @pytest.mark.parametrize("hours", [0, -1, None])
    def test_total_hours_must_be_positive(self, hours):
        with pytest.raises(InvalidInputError, match="greater than 0"):
            validate_total_hours(hours)
