"""Domain layer: framework-agnostic lifecycle rules and ports."""
