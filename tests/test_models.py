"""
Unit tests for cEDH Card Performance Analyzer data models.
"""

import unittest
from dataclasses import FrozenInstanceError

from cedh_card_analyzer.models import (
    CommanderAnalysis, DeckRecord, PerformanceMetrics, SignificanceResult
)


class TestDeckRecord(unittest.TestCase):
    """Test cases for DeckRecord dataclass."""

    def test_deck_record_creation(self):
        """Test basic DeckRecord creation and derived properties."""
        record = DeckRecord(wins=3, losses=1, draws=2, card_list=["Sol Ring", "Mana Crypt"])

        self.assertEqual(record.total_games, 6)
        self.assertTrue(record.has_games)
        self.assertEqual(record.card_list, ("Sol Ring", "Mana Crypt"))
        self.assertIsNone(record.decklist_url)

    def test_record_without_games(self):
        """Test that a 0-0-0 record reports no games."""
        record = DeckRecord(wins=0, losses=0, draws=0, card_list=("Sol Ring",))
        self.assertEqual(record.total_games, 0)
        self.assertFalse(record.has_games)

    def test_negative_counts_rejected(self):
        """Test that negative game counts raise ValueError."""
        with self.assertRaises(ValueError):
            DeckRecord(wins=-1, losses=0, draws=0)

    def test_non_integer_counts_rejected(self):
        """Test that non-integer game counts raise ValueError."""
        with self.assertRaises(ValueError):
            DeckRecord(wins=1.5, losses=0, draws=0)
        with self.assertRaises(ValueError):
            DeckRecord(wins=True, losses=0, draws=0)

    def test_record_is_immutable(self):
        """Test that records cannot be modified after creation."""
        record = DeckRecord(wins=1, losses=0, draws=0)
        with self.assertRaises(FrozenInstanceError):
            record.wins = 2

    def test_from_entry_with_card_objects(self):
        """Test building a record from an entry with maindeck objects."""
        entry = {
            'wins': 4,
            'losses': 2,
            'draws': 1,
            'decklist': 'https://www.moxfield.com/decks/abc',
            'maindeck': [{'name': 'Sol Ring'}, {'name': 'Fire // Ice'}],
        }
        record = DeckRecord.from_entry(entry)

        self.assertEqual(record.wins, 4)
        self.assertEqual(record.card_list, ('Sol Ring', 'Fire // Ice'))
        self.assertEqual(record.decklist_url, 'https://www.moxfield.com/decks/abc')

    def test_from_entry_with_plain_names(self):
        """Test building a record from an entry with plain card names."""
        record = DeckRecord.from_entry({'wins': 0, 'losses': 1, 'draws': 0, 'maindeck': ['Island']})
        self.assertEqual(record.card_list, ('Island',))

    def test_from_entry_empty_decklist_is_none(self):
        """Test that an empty decklist string becomes None."""
        record = DeckRecord.from_entry({'wins': 0, 'losses': 0, 'draws': 0, 'decklist': ''})
        self.assertIsNone(record.decklist_url)
        self.assertEqual(record.card_list, ())

    def test_from_entry_missing_fields(self):
        """Test that missing result fields raise ValueError."""
        with self.assertRaises(ValueError) as context:
            DeckRecord.from_entry({'wins': 1, 'maindeck': []})
        self.assertIn('losses', str(context.exception))

    def test_from_entry_invalid_card(self):
        """Test that a maindeck card without a name raises ValueError."""
        with self.assertRaises(ValueError):
            DeckRecord.from_entry({'wins': 1, 'losses': 0, 'draws': 0, 'maindeck': [{'id': 3}]})

    def test_from_entry_maindeck_must_be_list(self):
        """Test that a maindeck given as a single string is rejected."""
        with self.assertRaises(ValueError) as context:
            DeckRecord.from_entry({'wins': 1, 'losses': 0, 'draws': 0, 'maindeck': 'Sol Ring'})
        self.assertIn('maindeck', str(context.exception))

    def test_from_entry_decklist_must_be_string(self):
        """Test that a non-string decklist link is rejected."""
        entry = {'wins': 1, 'losses': 0, 'draws': 0, 'decklist': 12345,
                 'maindeck': [{'name': 'Sol Ring'}]}
        with self.assertRaises(ValueError) as context:
            DeckRecord.from_entry(entry)
        self.assertIn('decklist', str(context.exception))

    def test_card_list_string_rejected(self):
        """Test that a bare string is not split into single-letter cards."""
        with self.assertRaises(ValueError):
            DeckRecord(1, 0, 0, 'Sol Ring')


class TestSignificanceResult(unittest.TestCase):
    """Test cases for SignificanceResult display helpers."""

    def test_text_with_p_value(self):
        """Test p-value text formatting."""
        result = SignificanceResult(p_value=0.012345, is_significant=True)
        self.assertEqual(result.text, "p=0.0123")
        self.assertFalse(result.insufficient_data)
        self.assertIsNone(result.warning)

    def test_text_without_p_value(self):
        """Test insufficient data text."""
        result = SignificanceResult(p_value=None, is_significant=False)
        self.assertEqual(result.text, "N/A (insufficient data)")
        self.assertTrue(result.insufficient_data)

    def test_warning_message(self):
        """Test low expected frequency warning message."""
        result = SignificanceResult(p_value=0.5, is_significant=False, low_expected_frequency_warning=True)
        self.assertEqual(result.warning, "Warning: low expected frequency")


class TestCommanderAnalysis(unittest.TestCase):
    """Test cases for CommanderAnalysis."""

    def test_card_count(self):
        """Test card count of an empty analysis."""
        analysis = CommanderAnalysis(
            card_stats=(),
            overall_metrics=PerformanceMetrics(),
            total_entries=0,
            min_inclusion_percentage=2.0,
        )
        self.assertEqual(analysis.card_count, 0)


if __name__ == '__main__':
    unittest.main()
