"""
Unit tests for result sorting, filtering and interpretation helpers.
"""

import unittest

from cedh_card_analyzer.models import CardStat, PerformanceMetrics, SignificanceResult
from cedh_card_analyzer.ranking import (
    classify_trend, describe_difference, select_top_cards, significant_only,
    sort_card_stats, win_rate_trend
)


def make_stat(name, win_rate, p_value=None, significant=False, decks_with_games=1, inclusion=10):
    """Build a CardStat with the fields the helpers read."""
    return CardStat(
        card_name=name,
        inclusion_count=inclusion,
        inclusion_percentage=float(inclusion),
        wins=0,
        losses=0,
        draws=0,
        decks_with_games=decks_with_games,
        total_games_with_card=0,
        win_rate_ignoring_draws=win_rate,
        win_rate_overall=win_rate - 1,
        stat_sig=SignificanceResult(p_value=p_value, is_significant=significant),
    )


class TestTrend(unittest.TestCase):
    """Test cases for trend helpers."""

    def test_win_rate_trend(self):
        """Test trend against the commander average (ratio vs. percentage)."""
        overall = PerformanceMetrics(win_rate_overall=0.25)
        stat = make_stat("Card", 31.0)  # overall win rate 30.0
        self.assertAlmostEqual(win_rate_trend(stat, overall), 5.0)

    def test_classify_trend(self):
        self.assertEqual(classify_trend(0.51), 'higher')
        self.assertEqual(classify_trend(0.5), 'similar')
        self.assertEqual(classify_trend(-0.5), 'similar')
        self.assertEqual(classify_trend(-2), 'lower')


class TestSortCardStats(unittest.TestCase):
    """Test cases for sort_card_stats."""

    def setUp(self):
        """Set up test fixtures."""
        self.stats = [
            make_stat("Bravo", 40.0, p_value=0.2),
            make_stat("alpha", 60.0, p_value=None),
            make_stat("Charlie", 50.0, p_value=0.01, significant=True),
        ]

    def names(self, stats):
        return [stat.card_name for stat in stats]

    def test_sort_by_win_rate(self):
        self.assertEqual(self.names(sort_card_stats(self.stats)), ["alpha", "Charlie", "Bravo"])
        self.assertEqual(
            self.names(sort_card_stats(self.stats, descending=False)),
            ["Bravo", "Charlie", "alpha"],
        )

    def test_sort_by_name_case_insensitive(self):
        result = sort_card_stats(self.stats, 'card_name', descending=False)
        self.assertEqual(self.names(result), ["alpha", "Bravo", "Charlie"])

    def test_sort_by_p_value_puts_missing_last(self):
        """Test that cards without a p-value sort last in both directions."""
        ascending = sort_card_stats(self.stats, 'stat_sig', descending=False)
        descending = sort_card_stats(self.stats, 'stat_sig', descending=True)

        self.assertEqual(self.names(ascending), ["Charlie", "Bravo", "alpha"])
        self.assertEqual(self.names(descending), ["Bravo", "Charlie", "alpha"])

    def test_sort_by_trend(self):
        overall = PerformanceMetrics(win_rate_overall=0.5)
        result = sort_card_stats(self.stats, 'trend', overall_metrics=overall)
        self.assertEqual(self.names(result), ["alpha", "Charlie", "Bravo"])

    def test_trend_requires_overall_metrics(self):
        with self.assertRaises(ValueError):
            sort_card_stats(self.stats, 'trend')

    def test_unknown_key(self):
        with self.assertRaises(ValueError):
            sort_card_stats(self.stats, 'popularity')

    def test_input_not_modified(self):
        original = list(self.stats)
        sort_card_stats(self.stats)
        self.assertEqual(self.stats, original)


class TestFiltering(unittest.TestCase):
    """Test cases for significant_only and select_top_cards."""

    def test_significant_only(self):
        stats = [make_stat("A", 50.0, 0.01, True), make_stat("B", 50.0, 0.3)]
        self.assertEqual([s.card_name for s in significant_only(stats)], ["A"])

    def test_select_top_cards(self):
        """Test top-N selection skips cards without games."""
        stats = [
            make_stat("A", 40.0),
            make_stat("B", 90.0, decks_with_games=0),
            make_stat("C", 70.0),
            make_stat("D", 55.0),
        ]
        top = select_top_cards(stats, 2)
        self.assertEqual([s.card_name for s in top], ["C", "D"])

        top_overall = select_top_cards(stats, 5, metric='win_rate_overall')
        self.assertEqual([s.card_name for s in top_overall], ["C", "D", "A"])

    def test_select_top_cards_unknown_metric(self):
        with self.assertRaises(ValueError):
            select_top_cards([], 3, metric='wins')


class TestDescribeDifference(unittest.TestCase):
    """Test cases for describe_difference."""

    def test_insufficient_data(self):
        text = describe_difference(4.0, SignificanceResult(p_value=None, is_significant=False))
        self.assertTrue(text.startswith("Insufficient data to perform a comparison."))

    def test_significant_higher(self):
        result = SignificanceResult(p_value=0.001, is_significant=True)
        self.assertEqual(
            describe_difference(5.13, result),
            "Associated with a 5.13% higher win rate. This is statistically significant. (p=0.0010)",
        )

    def test_not_significant_lower_with_warning(self):
        result = SignificanceResult(p_value=0.4, is_significant=False, low_expected_frequency_warning=True)
        self.assertEqual(
            describe_difference(-2.0, result),
            "Associated with a 2.00% lower win rate. This is not statistically significant. (p=0.4000, low E.F.)",
        )

    def test_no_notable_difference(self):
        result = SignificanceResult(p_value=1.0, is_significant=False)
        self.assertIn("No notable win rate difference observed.", describe_difference(0.0, result))


if __name__ == '__main__':
    unittest.main()
