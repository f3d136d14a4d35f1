"""Session slice behavior: history limit, key handling and what gets persisted."""

import json

from src.domains.file_search.models import FileSearchDocument, FileSearchStore
from src.domains.state.slices import (
    AppState,
    ApiKeySlice,
    QueryHistoryItem,
    QueryResult,
    QuerySlice,
    StoresSlice,
)


def history_item(n: int) -> QueryHistoryItem:
    return QueryHistoryItem(
        id=str(n), query=f"q{n}", response=f"r{n}", timestamp=n, store_name="s1"
    )


def store(name: str) -> FileSearchStore:
    return FileSearchStore.from_path(name)


def document(name: str) -> FileSearchDocument:
    return FileSearchDocument(
        name=f"fileSearchStores/s1/documents/{name}",
        display_name=name,
        create_time="2025-01-01T00:00:00Z",
        update_time="2025-01-01T00:00:00Z",
    )


def test_history_keeps_newest_first_and_caps_size():
    query = QuerySlice()
    for n in range(60):
        query.add_to_history(history_item(n))

    assert len(query.history) == 50
    assert query.history[0].id == "59"
    assert query.history[-1].id == "10"


def test_history_respects_custom_limit():
    query = QuerySlice(max_history_size=2)
    for n in range(3):
        query.add_to_history(history_item(n))

    assert [item.id for item in query.history] == ["2", "1"]


def test_api_key_is_trimmed():
    auth = ApiKeySlice()

    auth.set_api_key("  secret  ")
    assert auth.api_key == "secret"
    assert auth.has_api_key()

    auth.set_api_key("   ")
    assert auth.api_key == ""
    assert not auth.has_api_key()


def test_clear_api_key_resets_dependent_slices():
    state = AppState()
    state.set_api_key("k")
    state.stores.set_stores([store("a")])
    state.stores.set_current_store(store("a"))
    state.documents.set_documents([document("d1")])
    state.documents.toggle_select_document("d1")
    state.query.add_to_history(history_item(1))
    state.query.set_current_result(QueryResult(text="x", timestamp=1))
    state.model.set_temperature(0.5)

    state.clear_api_key()

    assert state.auth.api_key is None
    assert state.stores.stores == []
    assert state.stores.current_store is None
    assert state.stores.last_updated is None
    assert state.documents.documents == []
    assert state.documents.selected_documents == []
    assert state.query.history == []
    assert state.query.current_result is None
    # Model preferences are not tied to the key.
    assert state.model.temperature == 0.5


def test_stores_cache_validity():
    stores = StoresSlice()
    assert not stores.is_cache_valid()

    stores.set_stores([store("a")])
    assert stores.is_cache_valid(now=stores.last_updated + stores.cache_ttl - 1)
    assert not stores.is_cache_valid(now=stores.last_updated + stores.cache_ttl)


def test_remove_store_clears_matching_current_store():
    stores = StoresSlice()
    stores.set_stores([store("a"), store("b")])
    stores.set_current_store(store("a"))

    stores.remove_store("b")
    assert stores.current_store is not None

    stores.remove_store("a")
    assert stores.stores == []
    assert stores.current_store is None


def test_document_selection_toggles():
    state = AppState()
    state.documents.set_documents([document("d1"), document("d2")])
    d1 = state.documents.documents[0].name

    state.documents.toggle_select_document(d1)
    assert state.documents.selected_documents == [d1]
    state.documents.toggle_select_document(d1)
    assert state.documents.selected_documents == []

    state.documents.toggle_select_document(d1)
    state.documents.remove_document(d1)
    assert [d.display_name for d in state.documents.documents] == ["d2"]
    assert state.documents.selected_documents == []


def test_persisted_json_excludes_volatile_fields():
    state = AppState()
    state.set_api_key("k")
    state.query.add_to_history(history_item(1))
    state.query.set_current_result(QueryResult(text="x", timestamp=1))
    state.documents.set_documents([document("d1")])

    persisted = json.loads(state.persisted_json())
    volatile = json.loads(state.volatile_json())

    assert set(persisted) == {"auth", "model", "stores", "query"}
    assert "currentResult" not in persisted["query"]
    assert persisted["auth"] == {"apiKey": "k"}
    assert volatile["query"] == {"currentResult": {"text": "x", "groundingMetadata": None, "timestamp": 1}}
    assert len(volatile["documents"]["documents"]) == 1


def test_restore_merges_both_parts():
    state = AppState()
    state.set_api_key("k")
    state.query.add_to_history(history_item(1))
    state.query.set_current_result(QueryResult(text="x", timestamp=1))

    restored = AppState.restore(
        json.loads(state.persisted_json()), json.loads(state.volatile_json())
    )

    assert restored == state
