"""Infrastructure: scene file serialization."""
