"""Goal forecast HTTP servers."""
