from __future__ import annotations

import logging
from collections import Counter

from evrec_catalog.item_repo import ItemRepository
from evrec_catalog.schemas import Item
from evrec_vectors.sparse_vector import SparseVector

from .corpus_store import CorpusStore
from .idf import idf
from .tokenizer import Tokenizer, tokenize_for_tfidf, word_counts

log = logging.getLogger(__name__)


class TfIdfBuilder:
    """
    Rebuilds the corpus tables from the live catalog and turns them into TF-IDF vectors.

    The tables are only ever rebuilt in full. After any change to an item's text,
    tags, categories, host or existence the caller must run `rebuild()` before
    scoring; stale tables are not detected here.
    """

    def __init__(
        self,
        items: ItemRepository,
        store: CorpusStore,
        *,
        tokenizer: Tokenizer = tokenize_for_tfidf,
    ):
        self.items = items
        self.store = store
        self.tokenizer = tokenizer

    def rebuild(self) -> None:
        # counts are gathered in full before `replace` swaps the tables
        document_terms: Counter[str] = Counter()
        associations: dict[str, dict[str, int]] = {}
        num_items = 0
        for item in self.items.all_items():
            counts = word_counts(item.searchable_text(), self.tokenizer)
            # one increment per distinct word per item
            document_terms.update(counts.keys())
            associations[item.id] = dict(counts)
            num_items += 1

        self.store.replace(dict(document_terms), associations)
        log.info(
            "Corpus rebuilt: %d items, %d distinct terms", num_items, len(document_terms)
        )

    def term_vector(self, item: Item, num_documents: int) -> SparseVector[str]:
        counts = self.store.term_counts(item.id)
        if not counts:
            return SparseVector([], [])
        dfs = self.store.document_frequencies(counts.keys())
        # a term without a recorded document frequency weighs 0
        weights = {t: c * idf(dfs.get(t, 0), num_documents) for t, c in counts.items()}
        return SparseVector.from_mapping(weights).normalised()
