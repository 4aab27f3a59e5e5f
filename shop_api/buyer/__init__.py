"""Phone-based buyer accounts."""
