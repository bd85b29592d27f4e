"""
Core utilities: shared exceptions and cross-cutting concerns.
"""

from credit_passport.core.exceptions import (
    ConfigurationError,
    CreditPassportError,
    ExtractionParseError,
    PersistenceError,
    TransportError,
)

__all__ = [
    "ConfigurationError",
    "CreditPassportError",
    "ExtractionParseError",
    "PersistenceError",
    "TransportError",
]
