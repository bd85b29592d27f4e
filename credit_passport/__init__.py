"""
Credit Passport: credit profile normalization and aggregation engine.

Turns free-text credit reports from national bureaus into canonical profiles,
reconciles them with their on-chain persisted shape, and aggregates a user's
profiles into a single 0–100 global score plus dashboard statistics.
"""

__version__ = "0.1.0"
