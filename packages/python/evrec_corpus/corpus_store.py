from __future__ import annotations

from typing import Iterable, Mapping, Protocol

from postgrest.exceptions import APIError as PostgrestAPIError
from evrec_core.config import CORPUS_TABLE_ASSOCIATIONS, CORPUS_TABLE_DOCUMENT_TERMS
from evrec_core.supabase_client import chunked, map_pgrest, select_all
from evrec_core.types import ItemId

DocumentTerms = Mapping[str, int]  # term -> number of items containing it
Associations = Mapping[ItemId, Mapping[str, int]]  # item -> term -> raw count


class CorpusStore(Protocol):
    """Persisted corpus tables: document frequencies and per-item raw term counts."""

    def replace(self, document_terms: DocumentTerms, associations: Associations) -> None: ...

    def clear(self) -> None: ...

    def document_terms(self) -> dict[str, int]: ...

    def document_frequencies(self, terms: Iterable[str]) -> dict[str, int]: ...

    def term_counts(self, item_id: ItemId) -> dict[str, int]: ...


class InMemoryCorpusStore:
    def __init__(self) -> None:
        self._document_terms: dict[str, int] = {}
        self._associations: dict[ItemId, dict[str, int]] = {}

    def replace(self, document_terms: DocumentTerms, associations: Associations) -> None:
        self.clear()
        self._document_terms = dict(document_terms)
        self._associations = {
            item_id: dict(counts) for item_id, counts in associations.items()
        }

    def clear(self) -> None:
        self._document_terms = {}
        self._associations = {}

    def document_terms(self) -> dict[str, int]:
        return dict(self._document_terms)

    def associations(self) -> dict[ItemId, dict[str, int]]:
        return {item_id: dict(c) for item_id, c in self._associations.items()}

    def document_frequencies(self, terms: Iterable[str]) -> dict[str, int]:
        return {t: self._document_terms[t] for t in terms if t in self._document_terms}

    def term_counts(self, item_id: ItemId) -> dict[str, int]:
        return dict(self._associations.get(item_id, {}))


class SupabaseCorpusStore:
    def __init__(
        self,
        client,
        *,
        document_terms_table: str = CORPUS_TABLE_DOCUMENT_TERMS,
        associations_table: str = CORPUS_TABLE_ASSOCIATIONS,
    ):
        self.client = client
        self.document_terms_table = document_terms_table
        self.associations_table = associations_table

    def replace(self, document_terms: DocumentTerms, associations: Associations) -> None:
        self.clear()

        term_rows = [
            {"term": term, "term_count": int(count)}
            for term, count in document_terms.items()
        ]
        assoc_rows = [
            {"item_id": item_id, "term": term, "term_count": int(count)}
            for item_id, counts in associations.items()
            for term, count in counts.items()
        ]
        try:
            for chunk in chunked(term_rows, 500):
                self.client.table(self.document_terms_table).insert(chunk).execute()
            for chunk in chunked(assoc_rows, 500):
                self.client.table(self.associations_table).insert(chunk).execute()
        except PostgrestAPIError as e:
            raise map_pgrest(e)

    def clear(self) -> None:
        # PostgREST refuses an unfiltered delete
        try:
            self.client.table(self.associations_table).delete().neq("term", "").execute()
            self.client.table(self.document_terms_table).delete().neq("term", "").execute()
        except PostgrestAPIError as e:
            raise map_pgrest(e)

    def document_terms(self) -> dict[str, int]:
        rows = select_all(
            lambda: self.client.table(self.document_terms_table)
            .select("term, term_count")
            .order("term")
        )
        return {r["term"]: int(r["term_count"]) for r in rows}

    def document_frequencies(self, terms: Iterable[str]) -> dict[str, int]:
        wanted = sorted(set(terms))
        out: dict[str, int] = {}
        for chunk in chunked(wanted):
            rows = select_all(
                lambda chunk=chunk: self.client.table(self.document_terms_table)
                .select("term, term_count")
                .in_("term", chunk)
                .order("term")
            )
            out.update({r["term"]: int(r["term_count"]) for r in rows})
        return out

    def term_counts(self, item_id: ItemId) -> dict[str, int]:
        rows = select_all(
            lambda: self.client.table(self.associations_table)
            .select("term, term_count")
            .eq("item_id", item_id)
            .order("term")
        )
        return {r["term"]: int(r["term_count"]) for r in rows}
