"""link_scout.crawler: HTTP fetching, document model and the site walker."""
