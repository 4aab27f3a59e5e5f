"""Orders and their detail lines."""
