"""Paginated, searchable aggregation of the newest Hacker News stories."""

__version__ = "1.0.0"
