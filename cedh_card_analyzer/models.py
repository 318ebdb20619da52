"""
Data models for the cEDH Card Performance Analyzer.

This module contains the core data structures used throughout the application,
including DeckRecord, PerformanceMetrics, SignificanceResult and the result
objects produced by the two analyzers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class DeckRecord:
    """One submitted deck's results and maindeck card list."""
    wins: int
    losses: int
    draws: int
    card_list: Tuple[str, ...] = field(default_factory=tuple)
    decklist_url: Optional[str] = None

    def __post_init__(self):
        """Validate game counts and freeze the card list."""
        for label in ('wins', 'losses', 'draws'):
            value = getattr(self, label)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{label} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{label} must be non-negative, got {value}")

        if isinstance(self.card_list, str):
            raise ValueError(f"card_list must be a sequence of card names, not {self.card_list!r}")
        if not isinstance(self.card_list, tuple):
            object.__setattr__(self, 'card_list', tuple(self.card_list))

    @property
    def total_games(self) -> int:
        """Total number of recorded games for this deck."""
        return self.wins + self.losses + self.draws

    @property
    def has_games(self) -> bool:
        """True when the deck has at least one recorded game."""
        return self.total_games > 0

    @classmethod
    def from_entry(cls, entry: Dict[str, Any]) -> 'DeckRecord':
        """
        Build a record from a tournament deck entry mapping.

        Args:
            entry: Mapping with ``wins``, ``losses``, ``draws``, an optional
                ``decklist`` URL and a ``maindeck`` list holding either
                ``{"name": ...}`` objects or plain card names

        Returns:
            DeckRecord for the entry

        Raises:
            ValueError: If the entry is missing fields or has invalid values
        """
        if not isinstance(entry, dict):
            raise ValueError(f"Deck entry must be an object, got {type(entry).__name__}")

        missing = [key for key in ('wins', 'losses', 'draws') if key not in entry]
        if missing:
            raise ValueError(f"Deck entry is missing fields: {', '.join(missing)}")

        maindeck = entry.get('maindeck') or []
        if not isinstance(maindeck, list):
            raise ValueError(f"maindeck must be a list, got {type(maindeck).__name__}")

        decklist = entry.get('decklist')
        if decklist is not None and not isinstance(decklist, str):
            raise ValueError(f"decklist must be a URL string, got {type(decklist).__name__}")

        cards = []
        for card in maindeck:
            if isinstance(card, dict):
                name = card.get('name')
            else:
                name = card
            if not isinstance(name, str) or not name:
                raise ValueError(f"Invalid maindeck card: {card!r}")
            cards.append(name)

        return cls(
            wins=entry['wins'],
            losses=entry['losses'],
            draws=entry['draws'],
            card_list=tuple(cards),
            decklist_url=decklist or None,
        )


@dataclass(frozen=True)
class PerformanceMetrics:
    """Aggregate win/loss/draw counts and win-rate ratios (0 to 1)."""
    wins: int = 0
    losses: int = 0
    draws: int = 0
    total_games: int = 0
    deck_count_with_games: int = 0
    win_rate_ignoring_draws: float = 0.0
    win_rate_overall: float = 0.0


@dataclass(frozen=True)
class SignificanceResult:
    """Outcome of a chi-squared test on a 2x2 win/non-win table."""
    p_value: Optional[float]
    is_significant: bool
    low_expected_frequency_warning: bool = False
    statistic: Optional[float] = None

    @property
    def insufficient_data(self) -> bool:
        """True when a margin of the contingency table was zero."""
        return self.p_value is None

    @property
    def text(self) -> str:
        """Short display form of the p-value."""
        if self.p_value is None:
            return "N/A (insufficient data)"
        return f"p={self.p_value:.4f}"

    @property
    def warning(self) -> Optional[str]:
        """Advisory message for low expected cell frequencies."""
        if self.low_expected_frequency_warning:
            return "Warning: low expected frequency"
        return None


@dataclass(frozen=True)
class CardStat:
    """
    Per-card performance across a commander's decks.

    Win rates here are percentages (0 to 100), unlike PerformanceMetrics
    which stores ratios.
    """
    card_name: str
    inclusion_count: int
    inclusion_percentage: float
    wins: int
    losses: int
    draws: int
    decks_with_games: int
    total_games_with_card: int
    win_rate_ignoring_draws: float
    win_rate_overall: float
    stat_sig: SignificanceResult


@dataclass(frozen=True)
class SingleCardAnalysis:
    """Comparison of decks with and without a single card."""
    card_name: str
    total_entries: int
    decks_with_card_count: int
    decks_without_card_count: int
    inclusion_percentage: float
    metrics_with_card: PerformanceMetrics
    metrics_without_card: PerformanceMetrics
    win_rate_diff_ignoring_draws: float
    win_rate_diff_overall: float
    chi_squared_overall: SignificanceResult
    chi_squared_ignoring_draws: SignificanceResult
    decklist_links_with_card: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CommanderAnalysis:
    """Per-card statistics for every card that clears the inclusion threshold."""
    card_stats: Tuple[CardStat, ...]
    overall_metrics: PerformanceMetrics
    total_entries: int
    min_inclusion_percentage: float

    @property
    def card_count(self) -> int:
        """Number of cards retained after threshold filtering."""
        return len(self.card_stats)
