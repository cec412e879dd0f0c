"""Client library for the Linear GraphQL API, with structured logging and environment-driven settings."""

__version__ = "0.1.0"

__all__ = ["client", "config", "log", "models", "queries"]