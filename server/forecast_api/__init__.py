"""Goal Forecast API package."""
