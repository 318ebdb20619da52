#!/usr/bin/env python3
"""
Main entry point script for the cEDH Card Performance Analyzer.

This script can be run directly from the command line to analyze card
performance from an exported set of tournament deck entries.
"""

import sys
from pathlib import Path

# Add the project directory to Python path
project_dir = Path(__file__).parent
sys.path.insert(0, str(project_dir))

from cedh_card_analyzer.cli import main

if __name__ == "__main__":
    main()
