"""
Storage collaborators: off-chain content pinning and the profile ledger.
"""

from credit_passport.storage.ledger import InMemoryProfileLedger
from credit_passport.storage.pinata import PinataPinner

__all__ = ["InMemoryProfileLedger", "PinataPinner"]
