from .main_functions import (
    ArityError,
    RankOutOfRangeError,
    InvariantViolation,
    count_perms,
    generate_perm,
    generate_perm_raw,
    generate_perm_lazy,
    rank_perm,
    rank_perm_raw,
    SortedPool,
    MaskPool,
    WORKING_SETS,
)
