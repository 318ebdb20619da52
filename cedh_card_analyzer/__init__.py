"""cEDH Card Performance Analyzer

A command-line tool that compares how individual cards perform across a
commander's tournament decks, with chi-squared significance testing.
"""

__version__ = "0.1.0"
__author__ = "cEDH Card Performance Analyzer"
__description__ = "Card performance statistics for cEDH tournament decks"
