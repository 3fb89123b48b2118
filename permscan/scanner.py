from dataclasses import dataclass
from pathlib import Path
import logging

from .call_counter import call_counter
from .checkpoint import get_value_as_int, update_key_value
from .perm_rank import ArityError, count_perms, generate_perm, generate_perm_lazy
from .utils import bigint_min_max

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanMatch:
    index: int
    phrase: str


class PermutationScanner:
    """
    Walks the k-permutations of a word universe in rank order, feeding each joined
    phrase to `checker` and checkpointing the next rank to visit after every step,
    so an interrupted scan resumes exactly where it stopped.

    Pass either `words`, or `n` and `resolve` to look words up on demand instead of holding them all.
    """

    def __init__(self, k, checkpoint_file, checker, words=None, n=None, resolve=None,
                 checkpoint_key="current_index", matches_file=None, log_every=1000):
        if words is not None:
            if resolve is not None:
                raise TypeError("pass either words or resolve, not both")
            self.words = tuple(words)
            self.n = len(self.words)
        elif resolve is not None and n is not None:
            self.words = None
            self.n = n
        else:
            raise TypeError("words, or n and resolve, are required")
        self._resolve = resolve

        if k > self.n:
            raise ArityError(k, self.n)
        self.k = k
        self.total = count_perms(self.n, k)
        self.checkpoint_file = Path(checkpoint_file)
        self.checkpoint_key = checkpoint_key
        self.matches_file = Path(matches_file) if matches_file is not None else None
        self._check = call_counter(log_every, logger, "checked {count} candidates")(checker)

    def cursor(self):
        return get_value_as_int(self.checkpoint_key, self.checkpoint_file, default=0, create_if_missing=True)

    def phrase_at(self, index):
        if self._resolve is not None:
            words = generate_perm_lazy(self._resolve, self.n, self.k, index)
        else:
            words = generate_perm(self.words, self.k, index)
        return " ".join(words)

    def scan(self, count):
        """Checks at most `count` ranks starting at the checkpoint, returns the matches."""
        if count < 0:
            raise ValueError(f"count must not be negative, got {count}")

        start = self.cursor()
        if start >= self.total:
            logger.info(f"Nothing left to scan: cursor {start} reached the end ({self.total})")
            return []

        end, _ = bigint_min_max(start + count, self.total)
        logger.info(f"Scanning ranks {start} to {end - 1} of {self.total} "
                    f"({self.k}-permutations of {self.n} words)")

        matches = []
        for index in range(start, end):
            phrase = self.phrase_at(index)
            if self._check(phrase):
                logger.info(f"Match at {index}: {phrase}")
                match = ScanMatch(index, phrase)
                matches.append(match)
                self._record(match)
            else:
                logger.debug(f"{index}: {phrase}")

            update_key_value(self.checkpoint_key, index + 1, self.checkpoint_file)

        if end == self.total:
            logger.info("----------DONE----------")
        return matches

    def _record(self, match):
        if self.matches_file is None:
            return
        self.matches_file.parent.mkdir(parents=True, exist_ok=True)
        with self.matches_file.open("a", encoding="utf-8") as f:
            f.write(f"{match.index}\t{match.phrase}\n")
