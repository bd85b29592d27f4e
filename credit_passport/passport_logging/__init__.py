"""
Structured logging for Credit Passport.

JSON logs with timestamp, event_type and keyword context.
Use get_logger() in all modules for aggregation-friendly output.
"""

from credit_passport.passport_logging.logger import bind_address, get_logger

__all__ = ["bind_address", "get_logger"]
