"""Output manager for formatting analysis reports and exporting card statistics."""

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .models import CommanderAnalysis, PerformanceMetrics, SignificanceResult, SingleCardAnalysis
from .ranking import (
    classify_trend, describe_difference, significant_only, sort_card_stats, win_rate_trend
)

TREND_LABELS = {
    'higher': '▲ Higher',
    'lower': '▼ Lower',
    'similar': '⬌ Similar',
}

CSV_COLUMNS = [
    'card_name', 'inclusion_count', 'inclusion_percentage', 'wins', 'losses', 'draws',
    'decks_with_games', 'total_games_with_card', 'win_rate_ignoring_draws',
    'win_rate_overall', 'p_value', 'is_significant', 'low_expected_frequency',
]


class OutputManager:
    """Handles report formatting and file output for analysis results."""

    def __init__(self, output_directory: str = "."):
        """
        Initialize output manager.

        Args:
            output_directory: Directory where reports will be written
        """
        self.logger = logging.getLogger(__name__)
        self.output_directory = Path(output_directory)
        self.output_directory.mkdir(parents=True, exist_ok=True)

    def generate_filename(self, name: str, suffix: str = "report", extension: str = "txt") -> str:
        """
        Generate a unique filename, adding a timestamp if the file exists.

        Args:
            name: Base name (commander or card)
            suffix: Descriptor appended to the base name
            extension: File extension without dot

        Returns:
            Filename relative to the output directory
        """
        safe_name = self._sanitize_filename(name)
        base_filename = f"{safe_name}_{suffix}.{extension}"

        if not (self.output_directory / base_filename).exists():
            return base_filename

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"{safe_name}_{suffix}_{timestamp}.{extension}"

    def _sanitize_filename(self, name: str) -> str:
        """
        Sanitize a string to be safe for use as a filename.

        Args:
            name: Raw string to sanitize

        Returns:
            Sanitized filename-safe string
        """
        sanitized = name.lower().replace(" ", "_")
        sanitized = "".join(c for c in sanitized if c.isalnum() or c in "_-")

        if not sanitized:
            sanitized = "analysis"

        return sanitized[:50]

    def _format_metrics(self, title: str, metrics: PerformanceMetrics) -> List[str]:
        return [
            f"{title}:",
            f"  Decks with games: {metrics.deck_count_with_games}",
            f"  Record (W-L-D): {metrics.wins}-{metrics.losses}-{metrics.draws}",
            f"  Total games: {metrics.total_games}",
            f"  Win Rate (W+L): {metrics.win_rate_ignoring_draws * 100:.2f}%",
            f"  Win Rate (Overall): {metrics.win_rate_overall * 100:.2f}%",
        ]

    def _format_p_value(self, result: SignificanceResult, digits: int = 4) -> str:
        if result.p_value is None:
            return "N/A"
        return f"{result.p_value:.{digits}f}"

    def format_single_card_report(self, result: SingleCardAnalysis, commander: Optional[str] = None) -> str:
        """
        Format a single-card analysis as a readable text report.

        Args:
            result: Single-card analysis to format
            commander: Optional commander name for the header

        Returns:
            Formatted report as string
        """
        lines = []

        lines.append("=" * 60)
        lines.append(f"Card Analysis: {result.card_name}")
        if commander:
            lines.append(f"Commander: {commander}")
        lines.append("=" * 60)
        lines.append("")

        lines.append(
            f"Based on {result.total_entries} decks. Decks with '{result.card_name}': "
            f"{result.decks_with_card_count} ({result.inclusion_percentage:.2f}%)."
        )
        lines.append("")

        lines.extend(self._format_metrics("WITH CARD", result.metrics_with_card))
        lines.append("")
        lines.extend(self._format_metrics("WITHOUT CARD", result.metrics_without_card))
        lines.append("")

        lines.append("AT A GLANCE:")
        framings = [
            ("Win Rate (W+L)", result.win_rate_diff_ignoring_draws, result.chi_squared_ignoring_draws),
            ("Win Rate (Overall)", result.win_rate_diff_overall, result.chi_squared_overall),
        ]
        for title, diff, test in framings:
            sign = '+' if diff >= 0 else ''
            lines.append(f"  {title}: {sign}{diff:.2f}% (p-value: {self._format_p_value(test)})")
            lines.append(f"    {describe_difference(diff, test)}")
        lines.append("")

        if result.decklist_links_with_card:
            lines.append(f"DECKLISTS WITH CARD ({len(result.decklist_links_with_card)}):")
            for link in result.decklist_links_with_card:
                lines.append(f"  {link}")
            lines.append("")

        return "\n".join(lines)

    def format_commander_report(
        self,
        result: CommanderAnalysis,
        commander: Optional[str] = None,
        sort_key: str = 'win_rate_ignoring_draws',
        descending: bool = True,
        top_n: Optional[int] = None,
        only_significant: bool = False,
    ) -> str:
        """
        Format a commander-wide analysis as a text table.

        Args:
            result: Commander-wide analysis to format
            commander: Optional commander name for the header
            sort_key: Column to sort by (see ranking.SORT_KEYS)
            descending: Sort from highest to lowest
            top_n: Limit the number of rows shown
            only_significant: Show only statistically significant cards

        Returns:
            Formatted report as string
        """
        overall = result.overall_metrics
        stats = list(result.card_stats)
        if only_significant:
            stats = significant_only(stats)
        stats = sort_card_stats(stats, sort_key, descending, overall_metrics=overall)

        shown = stats if top_n is None else stats[:top_n]

        lines = []
        lines.append("=" * 100)
        lines.append(f"Commander-Wide Card Analysis{': ' + commander if commander else ''}")
        lines.append("=" * 100)
        lines.append("")
        lines.append(
            f"Based on {result.total_entries} decks. Displaying {len(shown)} of "
            f"{result.card_count} cards found in at least {result.min_inclusion_percentage:.1f}% of these decks."
        )
        if only_significant:
            lines.append(f"Showing only statistically significant cards ({len(stats)}).")
        lines.append("")

        lines.extend(self._format_metrics("COMMANDER AVERAGE", overall))
        lines.append("")

        header = (
            f"{'Card':<34} {'Incl.':>7} {'Incl.%':>8} {'WR(W+L)':>8} {'WR(All)':>8} "
            f"{'Trend':<10} {'p-value':>9} {'Sig.':>4}"
        )
        lines.append(header)
        lines.append("-" * len(header))

        for stat in shown:
            trend = TREND_LABELS[classify_trend(win_rate_trend(stat, overall))]
            if stat.stat_sig.p_value is None:
                significance = "N/A"
            else:
                significance = "Yes" if stat.stat_sig.is_significant else "No"
            warning = "*" if stat.stat_sig.low_expected_frequency_warning else ""
            lines.append(
                f"{stat.card_name[:34]:<34} {stat.inclusion_count:>7d} "
                f"{stat.inclusion_percentage:>7.2f}% {stat.win_rate_ignoring_draws:>7.2f}% "
                f"{stat.win_rate_overall:>7.2f}% {trend:<10} "
                f"{self._format_p_value(stat.stat_sig, 6):>9} {significance + warning:>4}"
            )

        if any(stat.stat_sig.low_expected_frequency_warning for stat in shown):
            lines.append("")
            lines.append("* low expected frequency; the chi-squared result may be unreliable")

        lines.append("")
        return "\n".join(lines)

    def write_report(self, report: str, name: str, filename: Optional[str] = None) -> str:
        """
        Write a formatted report to the output directory.

        Args:
            report: Report text
            name: Base name used to generate the filename
            filename: Explicit filename (optional)

        Returns:
            Full path to the written file

        Raises:
            OSError: If the file cannot be written
        """
        if filename is None:
            filename = self.generate_filename(name)

        output_path = self.output_directory / filename
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(report)

        self.logger.info(f"Report written to {output_path}")
        return str(output_path)

    def write_card_stats_csv(self, result: CommanderAnalysis, name: str = "commander",
                             filename: Optional[str] = None) -> str:
        """
        Export every card statistic of a commander-wide analysis to CSV.

        Args:
            result: Commander-wide analysis to export
            name: Base name used to generate the filename
            filename: Explicit filename (optional)

        Returns:
            Full path to the written file
        """
        if filename is None:
            filename = self.generate_filename(name, suffix="card_stats", extension="csv")

        output_path = self.output_directory / filename
        with open(output_path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
            writer.writeheader()
            for stat in result.card_stats:
                writer.writerow({
                    'card_name': stat.card_name,
                    'inclusion_count': stat.inclusion_count,
                    'inclusion_percentage': f"{stat.inclusion_percentage:.4f}",
                    'wins': stat.wins,
                    'losses': stat.losses,
                    'draws': stat.draws,
                    'decks_with_games': stat.decks_with_games,
                    'total_games_with_card': stat.total_games_with_card,
                    'win_rate_ignoring_draws': f"{stat.win_rate_ignoring_draws:.4f}",
                    'win_rate_overall': f"{stat.win_rate_overall:.4f}",
                    'p_value': '' if stat.stat_sig.p_value is None else repr(stat.stat_sig.p_value),
                    'is_significant': stat.stat_sig.is_significant,
                    'low_expected_frequency': stat.stat_sig.low_expected_frequency_warning,
                })

        self.logger.info(f"Exported {result.card_count} card statistics to {output_path}")
        return str(output_path)
