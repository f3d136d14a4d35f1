from datetime import datetime, timezone
from types import SimpleNamespace

from src.domains.file_search.models import (
    FileSearchDocument,
    FileSearchStore,
    extract_store_id,
    get_full_store_name,
)


def test_store_name_helpers():
    assert get_full_store_name("abc") == "fileSearchStores/abc"
    assert get_full_store_name("fileSearchStores/abc") == "fileSearchStores/abc"
    assert extract_store_id("fileSearchStores/abc") == "abc"
    assert extract_store_id("abc") == "abc"
    assert extract_store_id(get_full_store_name("abc")) == "abc"


def test_store_from_sdk():
    created = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    sdk_store = SimpleNamespace(
        name="fileSearchStores/docs-1",
        display_name="docs",
        create_time=created,
        update_time="2025-01-03T00:00:00Z",
        active_documents_count="7",
        size_bytes=None,
    )

    store = FileSearchStore.from_sdk(sdk_store)

    assert store.name == "docs-1"
    assert store.display_name == "docs"
    assert store.create_time == created.isoformat()
    assert store.update_time == "2025-01-03T00:00:00Z"
    assert store.active_documents_count == 7
    assert store.size_bytes == 0
    assert store.full_name == "fileSearchStores/docs-1"


def test_store_from_sdk_singular_counter_and_fallback_name():
    sdk_store = SimpleNamespace(
        name="fileSearchStores/x", display_name=None, active_document_count=3
    )

    store = FileSearchStore.from_sdk(sdk_store, fallback_display_name="requested")

    assert store.display_name == "requested"
    assert store.active_documents_count == 3
    assert store.create_time.endswith("Z")


def test_store_from_path_uses_id_as_display_name():
    store = FileSearchStore.from_path("docs-1")

    assert store.name == "docs-1"
    assert store.display_name == "docs-1"
    assert store.active_documents_count == 0


def test_document_from_sdk():
    metadata = [
        SimpleNamespace(key="author", string_value="kim", numeric_value=None, string_list_value=None),
        SimpleNamespace(key="year", string_value=None, numeric_value=2024.0, string_list_value=None),
        SimpleNamespace(
            key="tags",
            string_value=None,
            numeric_value=None,
            string_list_value=SimpleNamespace(values=["a", "b"]),
        ),
    ]
    doc = SimpleNamespace(
        name="fileSearchStores/s/documents/guide-abc",
        display_name=None,
        create_time=None,
        update_time=None,
        custom_metadata=metadata,
        mime_type="application/pdf",
        size_bytes="1024",
    )

    document = FileSearchDocument.from_sdk(doc)

    assert document.display_name == "guide-abc"
    assert document.metadata == {"author": "kim", "year": 2024.0, "tags": ["a", "b"]}
    assert document.size_bytes == 1024
    assert document.model_dump(by_alias=True)["mimeType"] == "application/pdf"
