"""Sorting, filtering and interpretation helpers for analysis results."""

from dataclasses import fields
from typing import Iterable, List, Optional

from .models import CardStat, PerformanceMetrics, SignificanceResult

TREND_THRESHOLD = 0.5
NOTABLE_DIFFERENCE = 0.01

SORTABLE_FIELDS = {f.name for f in fields(CardStat) if f.name != 'stat_sig'}
SORT_KEYS = sorted(SORTABLE_FIELDS | {'stat_sig', 'trend'})

PLOT_METRICS = ('win_rate_ignoring_draws', 'win_rate_overall')


def win_rate_trend(card_stat: CardStat, overall_metrics: PerformanceMetrics) -> float:
    """Card's overall win rate minus the commander average, in percentage points."""
    return card_stat.win_rate_overall - overall_metrics.win_rate_overall * 100


def classify_trend(win_rate_diff: float) -> str:
    """Label a win-rate difference as 'higher', 'lower' or 'similar'."""
    if win_rate_diff > TREND_THRESHOLD:
        return 'higher'
    if win_rate_diff < -TREND_THRESHOLD:
        return 'lower'
    return 'similar'


def sort_card_stats(
    card_stats: Iterable[CardStat],
    key: str = 'win_rate_ignoring_draws',
    descending: bool = True,
    overall_metrics: Optional[PerformanceMetrics] = None,
) -> List[CardStat]:
    """
    Sort card statistics by a field, p-value or trend.

    Cards without a p-value always sort last when sorting by ``stat_sig``.

    Args:
        card_stats: Card statistics to sort
        key: CardStat field name, ``'stat_sig'`` or ``'trend'``
        descending: Sort from highest to lowest
        overall_metrics: Baseline metrics, required for ``'trend'``

    Returns:
        New sorted list

    Raises:
        ValueError: If the key is unknown or trend lacks a baseline
    """
    stats = list(card_stats)

    if key == 'stat_sig':
        with_p = [s for s in stats if s.stat_sig.p_value is not None]
        without_p = [s for s in stats if s.stat_sig.p_value is None]
        with_p.sort(key=lambda s: s.stat_sig.p_value, reverse=descending)
        return with_p + without_p

    if key == 'trend':
        if overall_metrics is None:
            raise ValueError("Sorting by trend requires the overall metrics")
        return sorted(stats, key=lambda s: win_rate_trend(s, overall_metrics), reverse=descending)

    if key not in SORTABLE_FIELDS:
        raise ValueError(f"Unknown sort key: {key}. Choose from: {', '.join(SORT_KEYS)}")

    if key == 'card_name':
        return sorted(stats, key=lambda s: s.card_name.lower(), reverse=descending)

    return sorted(stats, key=lambda s: getattr(s, key), reverse=descending)


def significant_only(card_stats: Iterable[CardStat]) -> List[CardStat]:
    """Keep cards whose comparison against the rest is significant."""
    return [stat for stat in card_stats if stat.stat_sig.is_significant]


def select_top_cards(
    card_stats: Iterable[CardStat],
    n: int,
    metric: str = 'win_rate_ignoring_draws',
) -> List[CardStat]:
    """
    Pick the best ``n`` cards by a win-rate metric, skipping cards without games.

    Args:
        card_stats: Card statistics to choose from
        n: Maximum number of cards
        metric: ``'win_rate_ignoring_draws'`` or ``'win_rate_overall'``

    Returns:
        Up to ``n`` cards, highest win rate first
    """
    if metric not in PLOT_METRICS:
        raise ValueError(f"Unknown metric: {metric}")

    played = [stat for stat in card_stats if stat.decks_with_games > 0]
    played.sort(key=lambda s: getattr(s, metric), reverse=True)
    return played[:max(0, n)]


def describe_difference(win_rate_diff: float, result: SignificanceResult) -> str:
    """
    Summarize a win-rate difference and its significance in plain text.

    Args:
        win_rate_diff: Difference in percentage points (with minus without)
        result: Significance test for the same comparison

    Returns:
        One-line interpretation
    """
    if result.p_value is None:
        return f"Insufficient data to perform a comparison. ({result.text})"

    magnitude = f"{abs(win_rate_diff):.2f}"
    if win_rate_diff > NOTABLE_DIFFERENCE:
        main_text = f"Associated with a {magnitude}% higher win rate."
    elif win_rate_diff < -NOTABLE_DIFFERENCE:
        main_text = f"Associated with a {magnitude}% lower win rate."
    else:
        main_text = "No notable win rate difference observed."

    p_display = f"(p={result.p_value:.4f}{', low E.F.' if result.warning else ''})"
    if result.is_significant:
        return f"{main_text} This is statistically significant. {p_display}"
    return f"{main_text} This is not statistically significant. {p_display}"
