import re
from math import perm
from sortedcontainers import SortedSet
import numpy as np


class ArityError(ValueError):
    '''more positions requested than there are items to fill them'''

    def __init__(self, k, n):
        super().__init__(f"k ({k}) cannot be greater than n ({n})")
        self.k = k
        self.n = n


class RankOutOfRangeError(IndexError):

    def __init__(self, rank, total):
        super().__init__(f"Index {rank} is out of bounds (0 to {total - 1})")
        self.rank = rank
        self.total = total


class InvariantViolation(RuntimeError):
    """
    The working set ran out of identities before the requested offset was reached.
    Only a bug in the block size arithmetic can get us here, never bad input.
    """


def count_perms(n, k):
    """
    Number of ordered selections of k items out of n, P(n, k).
    0 when k > n, 1 when k == 0. Exact for any magnitude.
    """
    return perm(n, k)


_DECIMAL = re.compile(r"-?[0-9]+")


def _as_rank(rank):
    # ranks cross process boundaries as decimal strings
    if isinstance(rank, bool) or not isinstance(rank, (int, str)):
        raise TypeError(f"rank must be an int or a decimal string, not {type(rank).__name__}")
    if isinstance(rank, str):
        text = rank.strip()
        if not _DECIMAL.fullmatch(text):
            raise ValueError(f"rank must be a decimal integer, got {rank!r}")
        return int(text)
    return rank


def _check_bounds(n, k, rank):
    if k > n:
        raise ArityError(k, n)

    total = count_perms(n, k)
    if not 0 <= rank < total:
        raise RankOutOfRangeError(rank, total)


def generate_perm(domain, k, rank):
    """
    Returns the k-permutation of `domain` at `rank`, in the lexicographic order
    induced by the order the items are given in.
    """
    available = list(domain)
    n = len(available)
    rank = _as_rank(rank)
    _check_bounds(n, k, rank)

    permutation = []
    for i in range(k):
        index, rank = divmod(rank, perm(n - i - 1, k - i - 1))
        permutation.append(available.pop(index))

    return tuple(permutation)


class SortedPool:
    '''identities 0..n-1 not taken yet, O(log n) positional access'''

    def __init__(self, n):
        self._s = SortedSet(range(n))

    def __len__(self):
        return len(self._s)

    def take(self, position):
        try:
            return self._s.pop(position)
        except IndexError:
            raise InvariantViolation(
                f"could not find element at position {position} among {len(self._s)} remaining"
            ) from None


class MaskPool:
    '''identities 0..n-1 not taken yet, as a boolean mask scanned in order'''

    def __init__(self, n):
        self._available = np.ones(n, dtype=bool)

    def __len__(self):
        return int(np.count_nonzero(self._available))

    def take(self, position):
        remaining = np.flatnonzero(self._available)
        if position >= len(remaining):
            raise InvariantViolation(
                f"could not find element at position {position} among {len(remaining)} remaining"
            )
        identity = int(remaining[position])
        self._available[identity] = False
        return identity


WORKING_SETS = {
    'sorted': SortedPool,
    'mask': MaskPool,
}


def generate_perm_raw(n, k, rank, working_set='sorted'):
    """
    Same ordering as generate_perm, over the identities 0..n-1.
    `working_set` picks how the not-yet-chosen identities are tracked, see WORKING_SETS.
    """
    try:
        pool_cls = WORKING_SETS[working_set]
    except KeyError:
        raise ValueError(f"Unknown working_set={working_set!r}") from None

    rank = _as_rank(rank)
    _check_bounds(n, k, rank)

    pool = pool_cls(n)
    permutation = []
    for i in range(k):
        position, rank = divmod(rank, perm(n - i - 1, k - i - 1))
        permutation.append(pool.take(position))

    return tuple(permutation)


def generate_perm_lazy(resolve, n, k, rank, working_set='sorted'):
    """
    Unranks over n abstract items and only calls `resolve(identity)` for the k chosen ones.
    Nothing is resolved if the rank is rejected.
    """
    return tuple(resolve(identity) for identity in generate_perm_raw(n, k, rank, working_set))


def rank_perm(permutation, domain):
    domain = tuple(domain)
    n = len(domain)
    index_map = {item: idx for idx, item in enumerate(domain)}
    if len(index_map) != n:
        raise ValueError("domain contains repeated items")

    try:
        seq = tuple(index_map[e] for e in permutation)
    except KeyError as e:
        raise ValueError(f"{e.args[0]!r} is not in the domain") from None

    return rank_perm_raw(seq, n)


def rank_perm_raw(seq, n):
    """
    Inverse of generate_perm_raw: the rank of a sequence of distinct identities 0..n-1.
    Walks backwards so each position's place value is the product of the
    pool sizes of the positions after it.
    """
    seq = tuple(seq)
    k = len(seq)
    if k > n:
        raise ArityError(k, n)
    if len(set(seq)) != k:
        raise ValueError(f"{seq} contains repeated items")
    for item in seq:
        if not 0 <= item < n:
            raise ValueError(f"{item} is not an identity in 0..{n - 1}")

    s = SortedSet(range(n))
    s.difference_update(seq)

    rank = 0
    place_val = 1
    for item in reversed(seq):
        s.add(item)
        rank += s.index(item) * place_val
        place_val *= len(s)

    return rank
