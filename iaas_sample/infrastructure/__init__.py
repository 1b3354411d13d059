"""Infrastructure layer: provider adapters, logging and exceptions."""
