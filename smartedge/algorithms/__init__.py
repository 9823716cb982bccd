"""Grid construction algorithms."""
