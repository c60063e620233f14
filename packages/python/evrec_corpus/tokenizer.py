from __future__ import annotations

import logging
import re
import threading
from collections import Counter
from typing import Callable, List

import nltk
from nltk.corpus import stopwords
from nltk.stem import PorterStemmer

log = logging.getLogger(__name__)

Tokenizer = Callable[[str], List[str]]

_stop_words_lock = threading.Lock()


def _load_stop_words() -> set[str]:
    try:
        return set(stopwords.words("english"))
    except LookupError as e:
        log.warning("NLTK stopwords unavailable, keeping all words: %s", e)
        return set()


_STOP_WORDS = _load_stop_words()

_STEMMER = PorterStemmer()


def tokenize_for_tfidf(text: str) -> List[str]:
    """
    Default tokenizer for item text.

    Lower-cases, splits on non-alphanumeric boundaries, drops English stopwords
    (when the NLTK corpus is installed) and applies Porter stemming, so that
    "concert" and "concerts" count as the same term.
    """
    if not text or not isinstance(text, str):
        return []
    tokens = re.findall(r"[a-z0-9]+", text.lower())
    with _stop_words_lock:
        sw = _STOP_WORDS
    return [_STEMMER.stem(w) for w in tokens if w not in sw]


def word_counts(texts: list[str], tokenizer: Tokenizer = tokenize_for_tfidf) -> Counter[str]:
    # counts summed over all given texts (e.g. name + description)
    counts: Counter[str] = Counter()
    for text in texts:
        counts.update(tokenizer(text or ""))
    return counts


def configure_nltk_data(path: str | None) -> None:
    """Add an extra NLTK data directory and reload the stopword list from it."""
    global _STOP_WORDS
    if not path:
        return
    if path not in nltk.data.path:
        nltk.data.path.append(path)
    with _stop_words_lock:
        _STOP_WORDS = _load_stop_words()
