"""link_scout.parser: HTML parsing helpers."""
