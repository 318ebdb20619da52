"""
Record loader module for reading exported tournament deck entries.

This module reads an already-fetched export of a commander's deck entries
from a JSON file and turns it into DeckRecord objects for analysis.
"""

import json
import logging
from pathlib import Path
from typing import Any, List

from .models import DeckRecord


class RecordLoadError(Exception):
    """Raised when a deck record export cannot be read."""
    pass


class RecordLoader:
    """Handles loading deck records from JSON exports."""

    def __init__(self, encoding: str = 'utf-8'):
        """Initialize the record loader."""
        self.logger = logging.getLogger(__name__)
        self.encoding = encoding

    def load_records(self, json_path: str) -> List[DeckRecord]:
        """
        Load deck records from a JSON export.

        Three layouts are accepted: a plain list of entries, an object with
        an ``entries`` list, or a GraphQL response with
        ``data.commander.entries.edges[].node``.

        Args:
            json_path: Path to the JSON file

        Returns:
            List of DeckRecord objects in file order

        Raises:
            FileNotFoundError: If the file doesn't exist
            RecordLoadError: If the file can't be parsed
        """
        json_file = Path(json_path)

        if not json_file.exists():
            raise FileNotFoundError(f"Records file not found: {json_path}")

        if not json_file.is_file():
            raise RecordLoadError(f"Path is not a file: {json_path}")

        try:
            with open(json_file, 'r', encoding=self.encoding) as f:
                data = json.load(f)
        except UnicodeDecodeError as e:
            raise RecordLoadError(f"File encoding error: {str(e)}")
        except json.JSONDecodeError as e:
            raise RecordLoadError(f"JSON parsing error: {str(e)}")

        records = self.parse_entries(self._extract_entries(data))

        no_games = sum(1 for record in records if not record.has_games)
        self.logger.info(f"Loaded {len(records)} deck records from {json_file.name}")
        if no_games:
            self.logger.debug(f"{no_games} records have no recorded games")

        return records

    def parse_entries(self, entries: List[Any]) -> List[DeckRecord]:
        """
        Convert raw entry mappings into DeckRecord objects.

        Args:
            entries: Raw deck entries

        Returns:
            List of DeckRecord objects

        Raises:
            RecordLoadError: If an entry is malformed
        """
        records = []
        for index, entry in enumerate(entries):
            try:
                records.append(DeckRecord.from_entry(entry))
            except ValueError as e:
                raise RecordLoadError(f"Error parsing entry {index}: {str(e)}")
        return records

    def _extract_entries(self, data: Any) -> List[Any]:
        """
        Locate the list of deck entries inside a parsed JSON document.

        Args:
            data: Parsed JSON document

        Returns:
            List of raw entries
        """
        if isinstance(data, list):
            return data

        if isinstance(data, dict):
            if isinstance(data.get('entries'), list):
                return data['entries']

            # GraphQL connection layout
            connection = (
                (data.get('data') or {}).get('commander') or {}
            ).get('entries')
            if isinstance(connection, dict) and isinstance(connection.get('edges'), list):
                return [edge.get('node') if isinstance(edge, dict) else edge
                        for edge in connection['edges']]

        raise RecordLoadError(
            "Unrecognized records file layout; expected a list of entries, "
            "an object with 'entries', or a GraphQL commander response"
        )
