"""
Profiles package: canonical profile records, the on-chain shape decoder and
the persistence envelope.
"""

from credit_passport.profiles.models import (
    FieldDefaultingNotice,
    ParsedProfile,
    PersistedProfile,
    ProfileCollection,
)
from credit_passport.profiles.decoder import decode_profile, decode_profiles
from credit_passport.profiles.envelope import (
    CommitReceipt,
    build_chain_args,
    build_content_payload,
    commit_profile,
)

__all__ = [
    "FieldDefaultingNotice",
    "ParsedProfile",
    "PersistedProfile",
    "ProfileCollection",
    "decode_profile",
    "decode_profiles",
    "CommitReceipt",
    "build_chain_args",
    "build_content_payload",
    "commit_profile",
]
