"""Aggregation of deck records into win/loss/draw metrics."""

from typing import Iterable

from .models import DeckRecord, PerformanceMetrics


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, returning 0 when the denominator is zero."""
    if denominator > 0:
        return numerator / denominator
    return 0.0


def compute_metrics(records: Iterable[DeckRecord]) -> PerformanceMetrics:
    """
    Reduce deck records to aggregate counts and win-rate ratios.

    Records without any recorded game are skipped entirely.

    Args:
        records: Deck records to aggregate

    Returns:
        PerformanceMetrics with ratios between 0 and 1
    """
    wins = 0
    losses = 0
    draws = 0
    deck_count_with_games = 0

    for record in records:
        if not record.has_games:
            continue
        wins += record.wins
        losses += record.losses
        draws += record.draws
        deck_count_with_games += 1

    total_games = wins + losses + draws

    return PerformanceMetrics(
        wins=wins,
        losses=losses,
        draws=draws,
        total_games=total_games,
        deck_count_with_games=deck_count_with_games,
        win_rate_ignoring_draws=safe_ratio(wins, wins + losses),
        win_rate_overall=safe_ratio(wins, total_games),
    )
