import logging
from collections import Counter
from pathlib import Path

logger = logging.getLogger(__name__)


def _read_line(f):
    return f.readline().decode("utf-8").strip()


def _word_offsets(path):
    """
    Yields (byte offset, word) for every non blank line.
    Both the eager and the lazy readers go through here so they see the same words.
    """
    with open(path, "rb") as f:
        offset = 0
        for line in f:
            word = line.decode("utf-8").strip()
            if word:
                yield offset, word
            offset += len(line)


def _check_unique(counts, path):
    repeated = sorted(word for word, count in counts.items() if count > 1)
    if repeated:
        raise ValueError(f"{path} repeats words: {', '.join(repeated)}")


def load_words(path):
    """
    Reads one word per line. Blank lines are dropped, a word may appear only once.
    """
    words = tuple(word for _, word in _word_offsets(path))
    _check_unique(Counter(words), path)

    logger.debug(f"Loaded {len(words)} words from {path}")
    return words


def word_getter(path):
    """
    Returns (n, resolve) for use with generate_perm_lazy.
    Only the byte offsets of the lines are kept, a word is read from the file when resolved.
    """
    path = Path(path)
    offsets = []
    seen = Counter()
    for offset, word in _word_offsets(path):
        offsets.append(offset)
        seen[word] += 1
    _check_unique(seen, path)

    def resolve(identity):
        with path.open("rb") as f:
            f.seek(offsets[identity])
            return _read_line(f)

    return len(offsets), resolve
