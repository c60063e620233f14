import math
from datetime import datetime, timezone

import pytest
from postgrest.exceptions import APIError

from conftest import FakeSupabaseClient, make_item
from evrec_catalog.geo import distance_km, inverse_distance
from evrec_catalog.item_repo import InMemoryItemRepo, SupabaseItemRepo
from evrec_catalog.schemas import GeoPoint
from evrec_core.config import Settings
from evrec_core.errors import Conflict, Forbidden
from evrec_core.supabase_client import get_supabase_client
from evrec_corpus.corpus_store import SupabaseCorpusStore


def test_item_labels_are_case_folded_and_unique():
    item = make_item("e1", tags=["Jazz", "jazz ", "Live", ""], categories=["MUSIC"])
    assert item.tags == ["jazz", "live"]
    assert item.categories == ["music"]


def test_item_is_past():
    now = datetime(2030, 1, 1, tzinfo=timezone.utc)
    assert make_item("e1", ends_at=datetime(2029, 12, 31, tzinfo=timezone.utc)).is_past(now)
    assert not make_item("e2").is_past(now)


def test_distance():
    stockholm = GeoPoint(latitude=59.3293, longitude=18.0686)
    gothenburg = GeoPoint(latitude=57.7089, longitude=11.9746)
    assert distance_km(stockholm, stockholm) == 0.0
    assert distance_km(stockholm, gothenburg) == pytest.approx(398, abs=5)
    assert distance_km(stockholm, None) == math.inf
    assert distance_km(stockholm, GeoPoint(latitude=1.0)) == math.inf
    assert inverse_distance(0.0) == 1.0
    assert inverse_distance(math.inf) == 0.0


def test_in_memory_repo_put_and_remove():
    repo = InMemoryItemRepo([make_item("e1", host_id="h1"), make_item("e2")])
    assert [i.id for i in repo.all_items()] == ["e1", "e2"]
    assert repo.remove("e1") is True
    assert repo.remove("e1") is False
    assert repo.get("e1") is None


def test_supabase_item_repo_maps_rows():
    client = FakeSupabaseClient(
        {
            "events": [
                {
                    "id": 2,
                    "name": "Jazz night",
                    "description": None,
                    "tags": ["Jazz"],
                    "categories": None,
                    "host_id": 7,
                    "latitude": 59.3,
                    "longitude": 18.0,
                    "published": True,
                    "ends_at": "2030-01-01T20:00:00Z",
                },
                {"id": 1, "name": "Rock", "host_id": 7},
            ]
        }
    )
    repo = SupabaseItemRepo(client)
    items = repo.all_items()
    assert [i.id for i in items] == ["1", "2"]
    jazz = items[1]
    assert jazz.tags == ["jazz"]
    assert jazz.categories == []
    assert jazz.description == ""
    assert jazz.host_id == "7"
    assert jazz.location.known
    assert jazz.ends_at == datetime(2030, 1, 1, 20, tzinfo=timezone.utc)
    assert items[0].location is None

    assert repo.get(1).name == "Rock"
    assert repo.get(99) is None
    assert repo.get(2).host_id == "7"


def test_supabase_item_repo_maps_pgrest_errors():
    client = FakeSupabaseClient()
    client.fail_with = APIError({"message": "rls", "code": "42501", "hint": None, "details": None})
    with pytest.raises(Forbidden):
        SupabaseItemRepo(client).get("e1")


def test_supabase_corpus_store_replace_and_read():
    client = FakeSupabaseClient()
    store = SupabaseCorpusStore(client)
    store.replace({"old": 1}, {"e0": {"old": 1}})
    store.replace(
        {"concert": 2, "jazz": 1},
        {"e1": {"concert": 1, "jazz": 2}, "e2": {"concert": 1}},
    )

    assert store.document_terms() == {"concert": 2, "jazz": 1}
    assert store.term_counts("e1") == {"concert": 1, "jazz": 2}
    assert store.term_counts("e0") == {}
    assert store.document_frequencies(["jazz", "missing"]) == {"jazz": 1}
    assert ("document_term_count", "delete") in client.calls


def test_supabase_corpus_store_maps_unique_violation():
    client = FakeSupabaseClient()
    client.fail_with = APIError({"message": "dup", "code": "23505", "hint": None, "details": None})
    with pytest.raises(Conflict):
        SupabaseCorpusStore(client).replace({"a": 1}, {})


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "http://localhost")
    monkeypatch.setenv("MAX_RESULTS_CAP", "64")
    s = Settings(_env_file=None)
    assert s.supabase_url == "http://localhost"
    assert s.max_results_cap == 64


def test_supabase_client_requires_credentials(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_API_KEY", raising=False)
    with pytest.raises(EnvironmentError, match="SUPABASE_API_KEY"):
        get_supabase_client(Settings(_env_file=None))
