import logging
from mnemonic import Mnemonic

logger = logging.getLogger(__name__)


class PhraseChecker:
    """Callable that tells whether a space separated phrase passes the BIP-39 checksum."""

    def __init__(self, language="english"):
        self.language = language
        self._mnemonic = Mnemonic(language)
        self._wordset = frozenset(self._mnemonic.wordlist)

    def unknown_words(self, words):
        return [word for word in words if word not in self._wordset]

    def __call__(self, phrase):
        return self._mnemonic.check(phrase)
