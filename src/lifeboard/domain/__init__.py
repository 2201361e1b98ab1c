"""Domain-level contracts and value objects."""
