# permscan/__init__.py
"""
permscan: exact k-permutation counting and unranking over word lists,
with a resumable scanner that checks each phrase against the BIP-39 checksum.
"""

__version__ = "0.1.0"

from .perm_rank import (ArityError, RankOutOfRangeError, InvariantViolation,
    count_perms, generate_perm, generate_perm_raw, generate_perm_lazy, rank_perm, rank_perm_raw
)
from .utils import bigint_min_max

__all__ = [
    "ArityError",
    "RankOutOfRangeError",
    "InvariantViolation",
    "count_perms",
    "generate_perm",
    "generate_perm_raw",
    "generate_perm_lazy",
    "rank_perm",
    "rank_perm_raw",
    "bigint_min_max",
]
