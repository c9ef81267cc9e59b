"""CMS Categorizer - heuristic content categorization for a CMS."""

__version__ = "0.1.0"
