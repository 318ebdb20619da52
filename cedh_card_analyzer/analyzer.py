"""
Card performance analysis over a commander's deck records.

This module provides the single-card comparison (decks with vs. without a
card) and the commander-wide sweep that scores every card in the pool.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlparse

from .card_matcher import deck_contains_card
from .metrics import compute_metrics, safe_ratio
from .models import (
    CardStat, CommanderAnalysis, DeckRecord, PerformanceMetrics, SingleCardAnalysis
)
from .significance import chi_squared_test

logger = logging.getLogger(__name__)

DEFAULT_DECKLIST_HOSTS = ('moxfield.com', 'topdeck.gg')


class CardNotFoundInPoolError(Exception):
    """Raised when a single-card query matches none of the submitted decks."""

    def __init__(self, card_name: str):
        self.card_name = card_name
        super().__init__(
            f"The card '{card_name}' was not found in any submitted decks "
            f"with the current filters."
        )


def is_recognized_decklist(url: Optional[str], hosts: Iterable[str] = DEFAULT_DECKLIST_HOSTS) -> bool:
    """
    Check whether a decklist URL is hosted on one of the allowed sites.

    Args:
        url: Decklist link, possibly empty
        hosts: Allowed domains; subdomains match as well

    Returns:
        True if the URL's host belongs to an allowed domain
    """
    if not url:
        return False

    hostname = (urlparse(url.strip()).hostname or '').lower()
    if not hostname:
        return False

    for host in hosts:
        host = host.lower()
        if hostname == host or hostname.endswith('.' + host):
            return True
    return False


def analyze_single_card(
    card_name: str,
    records: Sequence[DeckRecord],
    decklist_hosts: Iterable[str] = DEFAULT_DECKLIST_HOSTS,
) -> SingleCardAnalysis:
    """
    Compare the performance of decks with and without a card.

    Args:
        card_name: Card to look for (split-card face names accepted)
        records: Deck records for one commander
        decklist_hosts: Domains whose decklist links are reported

    Returns:
        SingleCardAnalysis for the card

    Raises:
        CardNotFoundInPoolError: If no deck contains the card
    """
    decks_with_card = []
    decks_without_card = []

    for record in records:
        if deck_contains_card(record.card_list, card_name):
            decks_with_card.append(record)
        else:
            decks_without_card.append(record)

    logger.debug(
        f"Partitioned {len(records)} decks for '{card_name}': "
        f"{len(decks_with_card)} with, {len(decks_without_card)} without"
    )

    if not decks_with_card:
        raise CardNotFoundInPoolError(card_name)

    metrics_with_card = compute_metrics(decks_with_card)
    metrics_without_card = compute_metrics(decks_without_card)

    chi_squared_overall = chi_squared_test(
        metrics_with_card.wins,
        metrics_with_card.losses + metrics_with_card.draws,
        metrics_without_card.wins,
        metrics_without_card.losses + metrics_without_card.draws,
    )

    chi_squared_ignoring_draws = chi_squared_test(
        metrics_with_card.wins,
        metrics_with_card.losses,
        metrics_without_card.wins,
        metrics_without_card.losses,
    )

    hosts = tuple(decklist_hosts)
    decklist_links = tuple(
        record.decklist_url for record in decks_with_card
        if is_recognized_decklist(record.decklist_url, hosts)
    )

    return SingleCardAnalysis(
        card_name=card_name,
        total_entries=len(records),
        decks_with_card_count=len(decks_with_card),
        decks_without_card_count=len(decks_without_card),
        inclusion_percentage=safe_ratio(len(decks_with_card), len(records)) * 100,
        metrics_with_card=metrics_with_card,
        metrics_without_card=metrics_without_card,
        win_rate_diff_ignoring_draws=(
            metrics_with_card.win_rate_ignoring_draws - metrics_without_card.win_rate_ignoring_draws
        ) * 100,
        win_rate_diff_overall=(
            metrics_with_card.win_rate_overall - metrics_without_card.win_rate_overall
        ) * 100,
        chi_squared_overall=chi_squared_overall,
        chi_squared_ignoring_draws=chi_squared_ignoring_draws,
        decklist_links_with_card=decklist_links,
    )


@dataclass(frozen=True)
class CardTally:
    """Running totals for one card across the decks that include it."""
    inclusion_count: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    decks_with_games: int = 0
    total_games: int = 0

    def absorb(self, record: DeckRecord) -> 'CardTally':
        """Return a new tally with the record's results added."""
        has_games = record.has_games
        return CardTally(
            inclusion_count=self.inclusion_count + 1,
            wins=self.wins + record.wins,
            losses=self.losses + record.losses,
            draws=self.draws + record.draws,
            decks_with_games=self.decks_with_games + (1 if has_games else 0),
            total_games=self.total_games + (record.total_games if has_games else 0),
        )


EMPTY_TALLY = CardTally()


def tally_cards(records: Iterable[DeckRecord]) -> Mapping[str, CardTally]:
    """
    Accumulate per-card inclusion and results in a single pass.

    Inclusion is a presence flag: extra copies of a card in the same deck
    are ignored.

    Args:
        records: Deck records to fold

    Returns:
        Read-only mapping of card name to CardTally
    """
    tallies = {}
    for record in records:
        for card_name in dict.fromkeys(record.card_list):
            tallies[card_name] = tallies.get(card_name, EMPTY_TALLY).absorb(record)
    return MappingProxyType(tallies)


def build_card_stat(
    card_name: str,
    tally: CardTally,
    inclusion_percentage: float,
    overall_metrics: PerformanceMetrics,
) -> CardStat:
    """Score one card against the complement of decks that lack it."""
    wins_without = overall_metrics.wins - tally.wins
    non_wins_without = (
        (overall_metrics.losses - tally.losses) + (overall_metrics.draws - tally.draws)
    )

    stat_sig = chi_squared_test(
        tally.wins,
        tally.losses + tally.draws,
        wins_without,
        non_wins_without,
    )

    return CardStat(
        card_name=card_name,
        inclusion_count=tally.inclusion_count,
        inclusion_percentage=inclusion_percentage,
        wins=tally.wins,
        losses=tally.losses,
        draws=tally.draws,
        decks_with_games=tally.decks_with_games,
        total_games_with_card=tally.total_games,
        win_rate_ignoring_draws=safe_ratio(tally.wins, tally.wins + tally.losses) * 100,
        win_rate_overall=safe_ratio(tally.wins, tally.total_games) * 100,
        stat_sig=stat_sig,
    )


def analyze_commander_wide(
    records: Sequence[DeckRecord],
    min_inclusion_percentage: float,
) -> CommanderAnalysis:
    """
    Compute performance statistics for every card in a commander's decks.

    Args:
        records: Deck records for one commander
        min_inclusion_percentage: Cards included in a smaller share of
            decks (0 to 100) are left out of the result

    Returns:
        CommanderAnalysis with unordered card statistics and the overall
        metrics used as the comparison baseline
    """
    overall_metrics = compute_metrics(records)
    tallies = tally_cards(records)
    total_entries = len(records)

    retained = []
    for card_name, tally in tallies.items():
        inclusion_percentage = tally.inclusion_count / total_entries * 100
        if inclusion_percentage < min_inclusion_percentage:
            continue
        retained.append(build_card_stat(card_name, tally, inclusion_percentage, overall_metrics))

    card_stats: Tuple[CardStat, ...] = tuple(retained)

    logger.debug(
        f"Commander-wide analysis: {len(tallies)} distinct cards, "
        f"{len(card_stats)} at or above {min_inclusion_percentage:.2f}% inclusion"
    )

    return CommanderAnalysis(
        card_stats=card_stats,
        overall_metrics=overall_metrics,
        total_entries=total_entries,
        min_inclusion_percentage=min_inclusion_percentage,
    )
