"""Shared test constants and Hypothesis strategies."""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from hypothesis import strategies as st

from typeid7 import TypeID, factory


# =============================================================================
# Common Type Aliases and Factories
# =============================================================================

UserId = TypeID[Literal["user"]]
OrgId = TypeID[Literal["org"]]
ApiKeyId = TypeID[Literal["api_key"]]

UserIdFactory = factory(UserId)
OrgIdFactory = factory(OrgId)
ApiKeyIdFactory = factory(ApiKeyId)

# =============================================================================
# Known Vectors (TypeID string, UUID)
# =============================================================================

KNOWN_VECTORS = [
    ("user_01jsns7byze78t2e8kcgkabxcq", "01966b93-afdf-71d1-a139-136426a5f597"),
    ("user_01jsnsf2g7e2saxdjvz3j6tc3x", "01966b97-8a07-70b2-aeb6-5bf8e46d307d"),
    ("user_01jsnsfk97e6fs9587z73nax2r", "01966b97-cd27-719f-9495-07f9c7557458"),
    ("01jsnsq5hnef5scmjw9x8h7sg6", "01966b9b-9635-73cb-9652-5c4f5113e606"),
    ("01jsnsqhhre86rd028q5hbv9vr", "01966b9b-c638-720d-8680-48b962bda778"),
    ("01jsnsr3fbe54rkjzfkta25nct", "01966b9c-0deb-7149-89cb-ef9e9422d59a"),
    ("prefix_01h455vb4pex5vsknk084sn02q", "01890a5d-ac96-774b-bcce-b302099a8057"),
]

ZERO_UUID = "00000000-0000-0000-0000-000000000000"

# =============================================================================
# Hypothesis Strategies
# =============================================================================

# Strategy for valid non-empty prefixes (letters and underscores, letter at both ends)
prefix_strategy = st.from_regex(r"[a-z]([a-z_]*[a-z])?", fullmatch=True).filter(
    lambda s: len(s) <= 63
)

# Strategy for base32 alphabet characters
base32_strategy = st.sampled_from("0123456789abcdefghjkmnpqrstvwxyz")

# Strategy for 26-char suffixes that fit in 128 bits
base32_suffix_strategy = st.builds(
    lambda head, tail: head + tail,
    st.sampled_from("01234567"),
    st.text(base32_strategy, min_size=25, max_size=25),
)

# Strategy for arbitrary UUIDv7 values (version and variant bits forced)
uuidv7_strategy = st.integers(min_value=0, max_value=(1 << 128) - 1).map(
    lambda n: UUID(int=n, version=7)
)

