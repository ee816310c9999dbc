"""
Tests for count and percentage rank selection.
"""

import pytest

from svd_compress.rank_selection import (
    RankMode,
    estimate_rank_from_percentage,
    resolve_rank,
    select_rank_by_percentage,
)


SPECTRUM = [3.0, 2.0, 1.0]  # energies 9, 4, 1 out of 14


class TestSelectRankByPercentage:

    @pytest.mark.parametrize("percentage, expected", [(50, 1), (64, 1), (70, 2), (92, 2), (95, 3)])
    def test_cumulative_energy_threshold(self, percentage, expected):
        assert select_rank_by_percentage(SPECTRUM, percentage) == expected

    def test_full_energy_keeps_everything(self):
        spectrum = [54.2, 20.1, 7.7, 3.3, 0.4]
        assert select_rank_by_percentage(spectrum, 100) == len(spectrum)

    def test_non_decreasing_in_percentage(self):
        spectrum = [40.0, 22.0, 15.0, 9.0, 4.0, 2.0, 1.0, 0.5]
        ranks = [select_rank_by_percentage(spectrum, p) for p in range(1, 101)]
        assert ranks == sorted(ranks)

    def test_never_below_one(self):
        assert select_rank_by_percentage(SPECTRUM, 0.001) == 1

    def test_empty_spectrum(self):
        assert select_rank_by_percentage([], 80) == 1

    @pytest.mark.parametrize("percentage", [0, -5, 100.5])
    def test_rejects_out_of_range(self, percentage):
        with pytest.raises(ValueError):
            select_rank_by_percentage(SPECTRUM, percentage)


class TestEstimateRank:

    def test_square_root_heuristic(self):
        assert estimate_rank_from_percentage(100, 40, 30) == 30
        assert estimate_rank_from_percentage(25, 40, 30) == 15
        assert estimate_rank_from_percentage(1, 40, 30) == 3

    def test_floor_of_one(self):
        assert estimate_rank_from_percentage(0.0001, 40, 30) == 1

    def test_rejects_out_of_range(self):
        with pytest.raises(ValueError):
            estimate_rank_from_percentage(0, 10, 10)


class TestResolveRank:

    def test_count_mode_passes_value_through(self):
        assert resolve_rank(500, RankMode.COUNT, 10, 10) == 500
        assert resolve_rank(7, "count", 10, 10) == 7

    def test_percentage_without_spectrum_uses_estimate(self):
        assert resolve_rank(25, RankMode.PERCENTAGE, 40, 30) == 15

    def test_percentage_with_spectrum_uses_cumulative_energy(self):
        assert resolve_rank(70, RankMode.PERCENTAGE, 40, 30, singular_values=SPECTRUM) == 2

    def test_policies_are_distinct(self):
        exact = resolve_rank(50, RankMode.PERCENTAGE, 3, 3, singular_values=SPECTRUM)
        estimate = resolve_rank(50, RankMode.PERCENTAGE, 3, 3)

        assert exact == 1
        assert estimate == 2

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            resolve_rank(5, "energy", 10, 10)
