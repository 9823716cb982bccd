"""Domain layer: value objects and routing services."""
