"""Spreadsheet -> screening profile JSONL converter.

Rows of a sanctions/watchlist style workbook are normalized and mapped onto the
client/profile record schema consumed by downstream screening systems.
"""

__version__ = "0.3.0"
