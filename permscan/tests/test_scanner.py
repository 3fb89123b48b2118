import tempfile
import unittest
from itertools import permutations
from pathlib import Path
from unittest import mock

from ..checkpoint import get_value_as_int
from ..oracle import PhraseChecker
from ..perm_rank import ArityError
from ..scanner import PermutationScanner, ScanMatch


# BIP-39 test vector, every word distinct
VALID_PHRASE = "scheme spot photo card baby mountain device kick cradle pact join borrow"


class RecordingChecker:

    def __init__(self, accept):
        self.accept = accept
        self.seen = []

    def __call__(self, phrase):
        self.seen.append(phrase)
        return self.accept(phrase)


class TestPermutationScanner(unittest.TestCase):
    words = ("a", "b", "c", "d")

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.store = self.tmp / "data" / "store.txt"

    def tearDown(self):
        self._tmp.cleanup()

    def make_scanner(self, checker, **kwargs):
        return PermutationScanner(2, self.store, checker, words=self.words, **kwargs)

    def test_full_scan(self):
        checker = RecordingChecker(lambda phrase: phrase.startswith("c"))
        scanner = self.make_scanner(checker)
        self.assertEqual(scanner.total, 12)

        matches = scanner.scan(100)

        self.assertEqual(checker.seen, [" ".join(p) for p in permutations(self.words, 2)])
        self.assertEqual(matches, [ScanMatch(6, "c a"), ScanMatch(7, "c b"), ScanMatch(8, "c d")])
        self.assertEqual(get_value_as_int("current_index", self.store), 12)

        self.assertEqual(scanner.scan(100), [])
        self.assertEqual(len(checker.seen), 12)

    def test_resume_in_batches(self):
        checker = RecordingChecker(lambda phrase: False)
        scanner = self.make_scanner(checker)

        scanner.scan(5)
        self.assertEqual(scanner.cursor(), 5)
        self.assertEqual(len(checker.seen), 5)

        # a fresh scanner picks the cursor up from the store
        resumed = self.make_scanner(checker)
        resumed.scan(5)
        resumed.scan(5)
        self.assertEqual(resumed.cursor(), 12)
        self.assertEqual(checker.seen, [" ".join(p) for p in permutations(self.words, 2)])

    def test_zero_count(self):
        checker = RecordingChecker(lambda phrase: True)
        self.assertEqual(self.make_scanner(checker).scan(0), [])
        self.assertEqual(checker.seen, [])
        self.assertEqual(get_value_as_int("current_index", self.store), 0)

    def test_negative_count(self):
        with self.assertRaises(ValueError):
            self.make_scanner(lambda phrase: True).scan(-1)

    def test_custom_key(self):
        scanner = self.make_scanner(lambda phrase: False, checkpoint_key="words_ab")
        scanner.scan(3)
        self.assertEqual(get_value_as_int("words_ab", self.store), 3)
        with self.assertRaises(KeyError):
            get_value_as_int("current_index", self.store)

    def test_matches_file(self):
        matches_file = self.tmp / "out" / "matches.txt"
        scanner = self.make_scanner(lambda phrase: phrase.endswith("a"), matches_file=matches_file)
        scanner.scan(12)
        self.assertEqual(matches_file.read_text(), "3\tb a\n6\tc a\n9\td a\n")

    def test_lazy_scanner(self):
        resolved = []

        def resolve(identity):
            resolved.append(identity)
            return self.words[identity]

        checker = RecordingChecker(lambda phrase: phrase == "d c")
        scanner = PermutationScanner(2, self.store, checker, n=4, resolve=resolve)
        self.assertIsNone(scanner.words)
        self.assertEqual(scanner.scan(12), [ScanMatch(11, "d c")])
        self.assertEqual(checker.seen, [" ".join(p) for p in permutations(self.words, 2)])
        self.assertEqual(len(resolved), 24)

    def test_universe_arguments(self):
        with self.assertRaises(TypeError):
            PermutationScanner(2, self.store, lambda phrase: True)
        with self.assertRaises(TypeError):
            PermutationScanner(2, self.store, lambda phrase: True, resolve=self.words.__getitem__)
        with self.assertRaises(TypeError):
            PermutationScanner(2, self.store, lambda phrase: True, words=self.words,
                n=4, resolve=self.words.__getitem__)

    def test_interrupted_checkpoint_write(self):
        scanner = self.make_scanner(lambda phrase: False)
        scanner.scan(7)
        self.assertEqual(scanner.cursor(), 7)

        def interrupted_fsync(fd):
            raise KeyboardInterrupt

        with mock.patch("permscan.checkpoint.os.fsync", side_effect=interrupted_fsync):
            with self.assertRaises(KeyboardInterrupt):
                scanner.scan(1)

        self.assertEqual(scanner.cursor(), 7)
        self.assertEqual(sorted(p.name for p in self.store.parent.iterdir()), ["store.txt"])

        scanner.scan(1)
        self.assertEqual(scanner.cursor(), 8)

    def test_arity(self):
        with self.assertRaises(ArityError):
            PermutationScanner(5, self.store, lambda phrase: True, words=self.words)

    def test_progress_logging(self):
        scanner = self.make_scanner(lambda phrase: False, log_every=4)
        with self.assertLogs("permscan.scanner", level="INFO") as cm:
            scanner.scan(12)
        progress = [line for line in cm.output if "checked" in line]
        self.assertEqual(progress, [
            "INFO:permscan.scanner:checked 4 candidates",
            "INFO:permscan.scanner:checked 8 candidates",
            "INFO:permscan.scanner:checked 12 candidates",
        ])
        self.assertTrue(any("DONE" in line for line in cm.output))

    def test_with_phrase_checker(self):
        words = tuple(VALID_PHRASE.split())
        scanner = PermutationScanner(12, self.store, PhraseChecker(), words=words)
        matches = scanner.scan(1)
        self.assertEqual(matches, [ScanMatch(0, VALID_PHRASE)])
        self.assertEqual(scanner.cursor(), 1)


class TestPhraseChecker(unittest.TestCase):

    def test_check(self):
        checker = PhraseChecker()
        self.assertTrue(checker(VALID_PHRASE))
        self.assertFalse(checker(VALID_PHRASE.replace("borrow", "zzzz")))
        self.assertFalse(checker(" ".join(VALID_PHRASE.split()[:11])))

    def test_unknown_words(self):
        checker = PhraseChecker("english")
        self.assertEqual(checker.unknown_words(["scheme", "zzzz", "spot", "qqqq"]), ["zzzz", "qqqq"])


if __name__ == '__main__':
    unittest.main()
