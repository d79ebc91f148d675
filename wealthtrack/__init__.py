"""
WealthTrack - Source Package

A personal / small-business finance tracker: income and expense
transactions, grouped categories, and investor funds that accrue
interest until they mature.

DESIGN PRINCIPLES:
1. Interest figures are projected from stored data, never stored twice
2. Calendar-month arithmetic clamps to the last day of short months
3. Storage is a plain key-value store and is swappable
4. The AI assistant is optional; failures fall back to static text
"""

__version__ = "1.0.0"
__author__ = "WealthTrack Team"
