"""Command-line interface for the cEDH Card Performance Analyzer."""

import argparse
import sys
import logging
import time
from pathlib import Path
from typing import List, Optional, Sequence
from contextlib import contextmanager

from . import __version__
from .analyzer import CardNotFoundInPoolError, analyze_commander_wide, analyze_single_card
from .config import AnalysisConfig, ConfigManager, apply_env_overrides
from .models import DeckRecord
from .output_manager import OutputManager
from .ranking import SORT_KEYS
from .record_loader import RecordLoader, RecordLoadError


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments for the records file and analysis options.

    Args:
        argv: Argument list (defaults to sys.argv)

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog='cedh-card-analyzer',
        description='Analyze card performance across a commander\'s tournament decks',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s kinnan_entries.json --card "Sol Ring"
  %(prog)s kinnan_entries.json --min-inclusion 5 --top 40
  %(prog)s --sort stat_sig --ascending --significant-only entries.json
  %(prog)s --csv --output-dir ./reports entries.json
        """
    )

    parser.add_argument(
        'records_file',
        type=str,
        help='Path to a JSON export of the commander\'s deck entries'
    )

    parser.add_argument(
        '--card', '-c',
        type=str,
        help='Analyze a single card (decks with vs. without it); omit for commander-wide analysis'
    )

    parser.add_argument(
        '--commander',
        type=str,
        help='Commander name used in report headers and filenames'
    )

    parser.add_argument(
        '--min-inclusion',
        type=float,
        metavar='PCT',
        help='Minimum inclusion percentage for commander-wide analysis (default: from config, 2.0)'
    )

    parser.add_argument(
        '--top',
        type=int,
        metavar='N',
        help='Number of cards to show in the commander-wide table (default: from config, 25)'
    )

    parser.add_argument(
        '--sort',
        choices=SORT_KEYS,
        help='Column to sort the commander-wide table by (default: win_rate_ignoring_draws)'
    )

    parser.add_argument(
        '--ascending',
        action='store_true',
        help='Sort from lowest to highest'
    )

    parser.add_argument(
        '--significant-only',
        action='store_true',
        help='Show only statistically significant cards'
    )

    parser.add_argument(
        '--output-dir', '-o',
        type=str,
        help='Directory for saved reports (default: current directory)'
    )

    parser.add_argument(
        '--save-report',
        action='store_true',
        help='Save the text report to the output directory'
    )

    parser.add_argument(
        '--csv',
        action='store_true',
        help='Export all commander-wide card statistics to CSV'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output with detailed progress information'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress all output except errors'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    args = parser.parse_args(argv)

    if args.verbose and args.quiet:
        parser.error("--verbose and --quiet cannot be used together")

    if args.min_inclusion is not None and not 0 <= args.min_inclusion <= 100:
        parser.error("--min-inclusion must be between 0 and 100")

    if args.top is not None and args.top < 1:
        parser.error("--top must be at least 1")

    if args.card is not None and args.csv:
        parser.error("--csv is only available for commander-wide analysis")

    return args


def validate_inputs(records_file: str, card: Optional[str] = None) -> None:
    """
    Validate the records file path and card name.

    Args:
        records_file: Path to the JSON records file
        card: Optional card name to validate

    Raises:
        FileNotFoundError: If the records file doesn't exist
        ValueError: If inputs are invalid
    """
    records_path = Path(records_file)

    if not records_path.exists():
        raise FileNotFoundError(f"Records file not found: {records_file}")

    if not records_path.is_file():
        raise ValueError(f"Path is not a file: {records_file}")

    if records_path.stat().st_size == 0:
        raise ValueError(f"Records file is empty: {records_file}")

    if records_path.suffix.lower() != '.json':
        logging.warning(f"File extension '{records_path.suffix}' is not .json - will attempt to parse anyway")

    if card is not None and not card.strip():
        raise ValueError("Card name cannot be empty")


class ProgressIndicator:
    """Simple progress indicator for long-running operations."""

    def __init__(self, message: str, verbose: bool = False, quiet: bool = False):
        self.message = message
        self.verbose = verbose
        self.quiet = quiet
        self.start_time = None

    def __enter__(self):
        if not self.quiet:
            if self.verbose:
                print(f"[{time.strftime('%H:%M:%S')}] Starting: {self.message}")
            else:
                print(f"{self.message}...", end='', flush=True)

        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time:
            duration = time.time() - self.start_time

            if not self.quiet:
                status = "Completed" if exc_type is None else "Failed"
                if self.verbose:
                    print(f"[{time.strftime('%H:%M:%S')}] {status}: {self.message} ({duration:.1f}s)")
                else:
                    mark = "✓" if exc_type is None else "✗"
                    print(f" {mark} ({duration:.1f}s)")

    def update(self, status: str):
        """Update progress status."""
        if not self.quiet and self.verbose:
            print(f"[{time.strftime('%H:%M:%S')}] {self.message}: {status}")


def setup_logging(verbose: bool = False, quiet: bool = False, log_dir: Optional[Path] = None) -> None:
    """
    Set up logging for debugging and user information.

    Args:
        verbose: Enable verbose logging with detailed operation reporting
        quiet: Enable quiet mode (errors only)
        log_dir: Directory for the verbose-mode log file
    """
    if quiet:
        level = logging.ERROR
        format_str = '%(levelname)s: %(message)s'
    elif verbose:
        level = logging.DEBUG
        format_str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    else:
        level = logging.INFO
        format_str = '%(levelname)s: %(message)s'

    class MultilineFormatter(logging.Formatter):
        def format(self, record):
            formatted = super().format(record)
            if '\n' in formatted:
                lines = formatted.split('\n')
                return '\n'.join([lines[0]] + ['  ' + line for line in lines[1:]])
            return formatted

    logging.basicConfig(
        level=level,
        format=format_str,
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    for handler in logging.root.handlers:
        handler.setFormatter(MultilineFormatter(format_str, datefmt='%Y-%m-%d %H:%M:%S'))

    app_logger = logging.getLogger('cedh_card_analyzer')
    app_logger.setLevel(level)

    if verbose:
        try:
            log_dir = log_dir or Path.home() / '.cedh_card_analyzer' / 'logs'
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"cedh_card_analyzer_{time.strftime('%Y%m%d_%H%M%S')}.log"

            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(MultilineFormatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))

            logging.root.addHandler(file_handler)
            logging.info(f"Detailed logs will be saved to: {log_file}")

        except OSError as e:
            logging.warning(f"Could not set up file logging: {e}")


@contextmanager
def progress_context(message: str, verbose: bool = False, quiet: bool = False):
    """
    Context manager for showing progress indicators during operations.

    Args:
        message: Description of the operation
        verbose: Whether to show detailed progress
        quiet: Whether to suppress output
    """
    with ProgressIndicator(message, verbose, quiet) as indicator:
        yield indicator


def run_single_card_analysis(
    card: str,
    records: List[DeckRecord],
    config: AnalysisConfig,
    output_manager: OutputManager,
    commander: Optional[str] = None,
    save_report: bool = False,
    quiet: bool = False,
) -> Optional[str]:
    """
    Analyze one card and print (and optionally save) the report.

    Args:
        card: Card name to analyze
        records: Deck records for the commander
        config: Analysis configuration
        output_manager: Output manager for formatting and saving
        commander: Optional commander name for the header
        save_report: Whether to write the report file
        quiet: Whether to suppress the printed report

    Returns:
        Path of the saved report, if any

    Raises:
        CardNotFoundInPoolError: If no deck contains the card
    """
    result = analyze_single_card(card, records, decklist_hosts=config.decklist_hosts)
    report = output_manager.format_single_card_report(result, commander=commander)

    if not quiet:
        print(report)

    if save_report:
        return output_manager.write_report(report, f"{commander or 'deck'}_{card}")
    return None


def run_commander_analysis(
    records: List[DeckRecord],
    config: AnalysisConfig,
    output_manager: OutputManager,
    commander: Optional[str] = None,
    sort_key: Optional[str] = None,
    descending: bool = True,
    only_significant: bool = False,
    save_report: bool = False,
    export_csv: bool = False,
    quiet: bool = False,
) -> List[str]:
    """
    Run the commander-wide analysis and print (and optionally save) the results.

    Args:
        records: Deck records for the commander
        config: Analysis configuration (threshold, top N, default sort)
        output_manager: Output manager for formatting and saving
        commander: Optional commander name for the header
        sort_key: Column to sort by (defaults to the configured key)
        descending: Sort from highest to lowest
        only_significant: Show only statistically significant cards
        save_report: Whether to write the report file
        export_csv: Whether to export all card statistics to CSV
        quiet: Whether to suppress the printed report

    Returns:
        Paths of the files written
    """
    result = analyze_commander_wide(records, config.min_inclusion_percentage)

    report = output_manager.format_commander_report(
        result,
        commander=commander,
        sort_key=sort_key or config.default_sort_key,
        descending=descending,
        top_n=config.top_n_cards,
        only_significant=only_significant,
    )

    if not quiet:
        print(report)

    written = []
    name = commander or 'commander'
    if save_report:
        written.append(output_manager.write_report(report, name))
    if export_csv:
        written.append(output_manager.write_card_stats_csv(result, name))
    return written


def handle_user_friendly_errors(error: Exception, verbose: bool = False) -> str:
    """
    Convert technical errors into user-friendly error messages.

    Args:
        error: Exception to convert
        verbose: Whether to include technical details

    Returns:
        User-friendly error message
    """
    if isinstance(error, FileNotFoundError):
        return f"File not found: {error}"

    elif isinstance(error, RecordLoadError):
        return f"Could not read your records file: {error}"

    elif isinstance(error, CardNotFoundInPoolError):
        return f"{error} Check the spelling or widen the standing cutoff / time period of your export."

    elif isinstance(error, ValueError):
        return f"Invalid input: {error}"

    elif isinstance(error, OSError):
        return f"File system error: {error}"

    else:
        if verbose:
            return f"Unexpected error: {error}"
        else:
            return "An unexpected error occurred. Use --verbose for more details."


def main(argv: Optional[Sequence[str]] = None):
    """Main entry point for the cEDH Card Performance Analyzer CLI."""
    args = None

    try:
        args = parse_arguments(argv)

        config_manager = ConfigManager()
        config = apply_env_overrides(config_manager.get_config())

        if args.min_inclusion is not None:
            config.min_inclusion_percentage = args.min_inclusion
        if args.top is not None:
            config.top_n_cards = args.top

        verbose = args.verbose or (config.verbose_output and not args.quiet)
        setup_logging(verbose, args.quiet, log_dir=config_manager.get_logs_dir() if verbose else None)

        validate_inputs(args.records_file, args.card)

        if not args.quiet:
            print(f"cEDH Card Performance Analyzer v{__version__}")
            print("=" * 40)

        loader = RecordLoader(encoding=config.json_encoding)
        with progress_context("Loading deck records", verbose, args.quiet) as progress:
            records = loader.load_records(args.records_file)
            progress.update(f"Loaded {len(records)} deck records")

        output_manager = OutputManager(args.output_dir or config.default_output_dir)

        if args.card:
            saved = run_single_card_analysis(
                args.card.strip(),
                records,
                config,
                output_manager,
                commander=args.commander,
                save_report=args.save_report,
                quiet=args.quiet,
            )
            written = [saved] if saved else []
        else:
            written = run_commander_analysis(
                records,
                config,
                output_manager,
                commander=args.commander,
                sort_key=args.sort,
                descending=not args.ascending,
                only_significant=args.significant_only,
                save_report=args.save_report,
                export_csv=args.csv or config.export_csv,
                quiet=args.quiet,
            )

        if not args.quiet:
            for path in written:
                print(f"Saved: {path}")

    except KeyboardInterrupt:
        if not (args and args.quiet):
            print("\nOperation cancelled by user")
        sys.exit(1)

    except (FileNotFoundError, ValueError, RecordLoadError, CardNotFoundInPoolError) as e:
        print(f"Error: {handle_user_friendly_errors(e, args.verbose if args else False)}")
        sys.exit(1)

    except Exception as e:
        error_msg = handle_user_friendly_errors(e, args.verbose if args else False)

        if args and args.verbose:
            logging.error(f"Unexpected error: {e}")
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {error_msg}")

        sys.exit(1)


if __name__ == "__main__":
    main()
