"""Constant product AMM account state, price oracle, events and admin operations."""

__version__ = "0.2.0"

__all__ = ["account_load", "admin", "collect", "config", "events", "math", "oracle", "pool"]