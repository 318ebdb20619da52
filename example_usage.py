#!/usr/bin/env python3
"""
Example usage of the card analysis API without the command-line interface.
"""

from cedh_card_analyzer.analyzer import (
    CardNotFoundInPoolError, analyze_commander_wide, analyze_single_card
)
from cedh_card_analyzer.models import DeckRecord
from cedh_card_analyzer.ranking import describe_difference, select_top_cards, sort_card_stats


def build_sample_records():
    """A small hand-made pool of deck results."""
    return [
        DeckRecord(5, 1, 1, ("Sol Ring", "Rhystic Study", "Fire // Ice"), "https://moxfield.com/decks/a"),
        DeckRecord(4, 2, 0, ("Sol Ring", "Rhystic Study"), "https://topdeck.gg/deck/b"),
        DeckRecord(1, 4, 1, ("Sol Ring", "Mystic Remora")),
        DeckRecord(2, 3, 0, ("Sol Ring", "Mystic Remora", "Fire // Ice")),
        DeckRecord(0, 0, 0, ("Sol Ring", "Rhystic Study")),
    ]


def main():
    """Demonstrate single-card and commander-wide analysis."""

    print("cEDH Card Performance Analyzer - Example Usage")
    print("=" * 50)

    records = build_sample_records()

    # Example 1: one card, with vs. without
    print("Example 1: Single Card Analysis")
    print("-" * 30)

    result = analyze_single_card("Rhystic Study", records)
    print(f"Decks with card: {result.decks_with_card_count}/{result.total_entries} "
          f"({result.inclusion_percentage:.1f}%)")
    print(f"Win rate with card (W+L): {result.metrics_with_card.win_rate_ignoring_draws * 100:.2f}%")
    print(f"Win rate without card (W+L): {result.metrics_without_card.win_rate_ignoring_draws * 100:.2f}%")
    print(describe_difference(result.win_rate_diff_overall, result.chi_squared_overall))
    print(f"Decklists: {', '.join(result.decklist_links_with_card)}")

    print()

    # Example 2: a misspelled card is reported, not silently ignored
    print("Example 2: Card Not In Pool")
    print("-" * 30)

    try:
        analyze_single_card("Rhystic Studdy", records)
    except CardNotFoundInPoolError as e:
        print(f"Error: {e}")

    print()

    # Example 3: every card at or above 20% inclusion
    print("Example 3: Commander-Wide Analysis")
    print("-" * 30)

    analysis = analyze_commander_wide(records, min_inclusion_percentage=20)
    print(f"Commander average win rate: {analysis.overall_metrics.win_rate_overall * 100:.2f}%")

    for stat in sort_card_stats(analysis.card_stats, 'stat_sig', descending=False):
        print(f"  {stat.card_name:<16} {stat.inclusion_percentage:6.1f}%  "
              f"WR {stat.win_rate_overall:6.2f}%  {stat.stat_sig.text}")

    best = select_top_cards(analysis.card_stats, 2)
    print(f"Top cards by win rate: {', '.join(stat.card_name for stat in best)}")


if __name__ == "__main__":
    main()
