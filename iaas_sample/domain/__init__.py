"""Domain layer: compute value objects, ports and exceptions."""
