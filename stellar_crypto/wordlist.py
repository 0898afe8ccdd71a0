"""
BIP-39 word lists.

The 2048-word vocabularies are the reference files shipped with the
``mnemonic`` distribution (``mnemonic/wordlist/<language>.txt``).  Each
language is read once, on first request, and kept for the lifetime of the
process in ``WordList._cache``.  Population happens under
``WordList._lock`` with a double check, so concurrent first requests load
the file once; lookups after that never take the lock.
"""

from __future__ import annotations

import importlib.resources
import logging
import re
import threading
from typing import ClassVar, Iterable, Iterator, Optional

from stellar_crypto.errors import CorruptWordList, InvalidLength, UnsupportedLanguage

log = logging.getLogger("stellar_crypto.wordlist")

WORD_COUNT = 2048

LANGUAGE_ENGLISH = "english"
LANGUAGE_CHINESE_SIMPLIFIED = "chinese_simplified"
LANGUAGE_CHINESE_TRADITIONAL = "chinese_traditional"
LANGUAGE_FRENCH = "french"
LANGUAGE_ITALIAN = "italian"
LANGUAGE_JAPANESE = "japanese"
LANGUAGE_KOREAN = "korean"
LANGUAGE_SPANISH = "spanish"

_DATASET_PACKAGE = "mnemonic"
_DATASET_DIR = "wordlist"
_LANGUAGE_RE = re.compile(r"[a-z_]+")


def _dataset_root():
    return importlib.resources.files(_DATASET_PACKAGE).joinpath(_DATASET_DIR)


def available_languages() -> list[str]:
    """Language codes for which a word list file exists."""
    return sorted(
        entry.name[: -len(".txt")]
        for entry in _dataset_root().iterdir()
        if entry.name.endswith(".txt")
    )


def _load_words(language: str) -> list[str]:
    if not isinstance(language, str) or not _LANGUAGE_RE.fullmatch(language):
        raise UnsupportedLanguage(f"Unsupported word list language: {language!r}")
    resource = _dataset_root().joinpath(f"{language}.txt")
    if not resource.is_file():
        raise UnsupportedLanguage(f"Unsupported word list language: {language!r}")
    text = resource.read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


class WordList:
    """An immutable, ordered 2048-word vocabulary."""

    _cache: ClassVar[dict[str, WordList]] = {}
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, language: str, words: Iterable[str]):
        words = tuple(words)
        if len(words) != WORD_COUNT:
            raise CorruptWordList(
                f"Word list {language!r} has {len(words)} words, expected {WORD_COUNT}"
            )
        self.language = language
        self._words = words
        self._index = {word: i for i, word in enumerate(words)}
        self._folded: dict[str, int] = {}
        for i, word in enumerate(words):
            self._folded.setdefault(word.lower(), i)

    @classmethod
    def for_language(cls, language: str = LANGUAGE_ENGLISH) -> WordList:
        """Return the cached word list for *language*, loading it on first use."""
        cached = cls._cache.get(language)
        if cached is not None:
            return cached
        with cls._lock:
            cached = cls._cache.get(language)
            if cached is None:
                cached = cls(language, _load_words(language))
                cls._cache[language] = cached
                log.debug("Loaded %s word list (%d words)", language, WORD_COUNT)
        return cached

    @classmethod
    def english(cls) -> WordList:
        return cls.for_language(LANGUAGE_ENGLISH)

    @classmethod
    def cached_languages(cls) -> list[str]:
        return sorted(cls._cache)

    def word_at(self, index: int) -> str:
        if not 0 <= index < WORD_COUNT:
            raise InvalidLength(f"Word index must be in 0..{WORD_COUNT - 1}, got {index}")
        return self._words[index]

    def index_of(self, word: str, case_insensitive: bool = False) -> Optional[int]:
        if case_insensitive:
            return self._folded.get(word.lower())
        return self._index.get(word)

    @property
    def words(self) -> tuple[str, ...]:
        return self._words

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __contains__(self, word: object) -> bool:
        return word in self._index

    def __repr__(self) -> str:
        return f"WordList({self.language!r})"
