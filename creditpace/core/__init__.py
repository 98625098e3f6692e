"""Domain models, configuration and exceptions."""
