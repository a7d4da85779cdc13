"""Cleaning pipeline for the supermarket marketing-campaign table.

Modules:
- config: Data-quality rules (income floor, sentinels, remaps) and run settings.
- etl: Functions to extract, inspect, clean, normalize, and constrain the marketing table in SQLite.
- reports: Verification queries and windowed rankings on the cleaned table.
- sample: Synthetic marketing data with every dirty-data case represented.
"""

__all__ = [
    'config',
    'etl',
    'reports',
    'sample',
]
