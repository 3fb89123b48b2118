import sys
import argparse
import logging
from pathlib import Path

from .lazy_handler import setup_logger
from .oracle import PhraseChecker
from .perm_rank import ArityError, RankOutOfRangeError, InvariantViolation
from .perm_rank import count_perms, generate_perm, generate_perm_lazy, rank_perm
from .scanner import PermutationScanner
from .settings import load_settings
from .wordlist import load_words, word_getter

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(prog="permscan",
        description="Count, unrank and scan k-permutations of a word list.")
    parser.add_argument("--config", type=Path, help="INI settings file ([scan] group)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every candidate")
    parser.add_argument("--no-log-file", dest="log_file", action="store_false",
        help="only log to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    count = sub.add_parser("count", help="print P(n, k)")
    count.add_argument("word_file", type=Path, nargs="?")
    count.add_argument("--n", type=int, help="universe size, instead of a word file")
    count.add_argument("-k", type=int)

    unrank = sub.add_parser("unrank", help="print the phrase at an index")
    unrank.add_argument("word_file", type=Path)
    unrank.add_argument("index", help="decimal index, any size")
    unrank.add_argument("-k", type=int)
    unrank.add_argument("--lazy", action="store_true", default=None,
        help="read only the chosen words from the file")

    rank = sub.add_parser("rank", help="print the index of a phrase")
    rank.add_argument("word_file", type=Path)
    rank.add_argument("words", nargs="+")

    scan = sub.add_parser("scan", help="check the next batch of phrases, resuming from the checkpoint")
    scan.add_argument("word_file", type=Path, nargs="?")
    scan.add_argument("-k", type=int)
    scan.add_argument("--count", type=int)
    scan.add_argument("--checkpoint", dest="checkpoint_file", type=Path)
    scan.add_argument("--checkpoint-key")
    scan.add_argument("--matches", dest="matches_file", type=Path)
    scan.add_argument("--language")
    scan.add_argument("--log-every", type=int)
    scan.add_argument("--lazy", action="store_true", default=None)

    return parser


def _settings_from_args(args):
    settings = load_settings(args.config)
    return settings.override(**{
        name: getattr(args, name, None) for name in ("word_file", "k", "count", "checkpoint_file",
            "checkpoint_key", "matches_file", "language", "log_every", "lazy")
    })


def _require_word_file(settings):
    if settings.word_file is None:
        raise ValueError("a word file is required (argument or word_file in the settings file)")
    return settings.word_file


def run_count(args, settings):
    if args.n is not None:
        n = args.n
    else:
        n = len(load_words(_require_word_file(settings)))
    total = count_perms(n, settings.k)
    print(total)
    logger.debug(f"Total {settings.k}-permutations from {n} elements: {total}")
    return 0


def run_unrank(args, settings):
    word_file = _require_word_file(settings)
    if settings.lazy:
        n, resolve = word_getter(word_file)
        words = generate_perm_lazy(resolve, n, settings.k, args.index)
    else:
        words = generate_perm(load_words(word_file), settings.k, args.index)
    print(" ".join(words))
    return 0


def run_rank(args, settings):
    print(rank_perm(args.words, load_words(_require_word_file(settings))))
    return 0


def run_scan(args, settings):
    word_file = _require_word_file(settings)
    checker = PhraseChecker(settings.language)
    options = dict(checkpoint_key=settings.checkpoint_key, matches_file=settings.matches_file,
        log_every=settings.log_every)

    if settings.lazy:
        n, resolve = word_getter(word_file)
        scanner = PermutationScanner(settings.k, settings.checkpoint_file, checker, n=n, resolve=resolve, **options)
    else:
        words = load_words(word_file)
        unknown = checker.unknown_words(words)
        if unknown:
            logger.warning(f"{len(unknown)} words are not in the {settings.language} wordlist: {' '.join(unknown)}")
        scanner = PermutationScanner(settings.k, settings.checkpoint_file, checker, words=words, **options)

    logger.info(f"Total {scanner.k}-permutations from {scanner.n} elements: {scanner.total}")
    matches = scanner.scan(settings.count)
    for match in matches:
        print(f"{match.index}\t{match.phrase}")
    logger.info(f"{len(matches)} matches, next index {scanner.cursor()}")
    return 0


COMMANDS = {
    "count": run_count,
    "unrank": run_unrank,
    "rank": run_rank,
    "scan": run_scan,
}


def main(argv=None):
    """Entry point for the permscan command."""
    args = build_parser().parse_args(argv)
    setup_logger("permscan", "permscan", level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=args.log_file)
    logger.debug(f"__main__.py: starting {args.command}")

    try:
        settings = _settings_from_args(args)
        return COMMANDS[args.command](args, settings)
    except InvariantViolation:
        logger.exception("Internal error")
        return 1
    except (ArityError, RankOutOfRangeError, ValueError, TypeError, KeyError, OSError) as e:
        logger.error(e)
        return 2


if __name__ == '__main__':
    sys.exit(main())
