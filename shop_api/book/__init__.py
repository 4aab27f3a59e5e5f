"""Book catalog."""
