from itertools import permutations
from math import factorial


__all__ = ['count_perms_safe', 'generate_perm_safe', 'rank_perm_safe']


def count_perms_safe(n, k):
    '''slow but correct version of count_perms'''
    if k > n:
        return 0
    return factorial(n) // factorial(n - k)


def generate_perm_safe(domain, k, rank):
    '''slow but correct version of generate_perm'''
    for r, perm in enumerate(permutations(domain, k)):
        if rank == r:
            return perm


def rank_perm_safe(perm, domain):
    '''slow but correct version of rank_perm'''
    perm = tuple(perm)
    for r, seq in enumerate(permutations(domain, len(perm))):
        if seq == perm:
            return r
