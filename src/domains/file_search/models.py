from datetime import datetime, timezone
from typing import Any

from src.domains.base import CamelModel

# Every store resource name returned by the API starts with this prefix.
STORE_PREFIX = "fileSearchStores/"


def extract_store_id(full_name: str) -> str:
    """'fileSearchStores/test-aec0gqdpt7m4' -> 'test-aec0gqdpt7m4'."""
    if full_name.startswith(STORE_PREFIX):
        return full_name[len(STORE_PREFIX) :]
    return full_name


def get_full_store_name(store_id: str) -> str:
    """'test-aec0gqdpt7m4' -> 'fileSearchStores/test-aec0gqdpt7m4'."""
    if store_id.startswith(STORE_PREFIX):
        return store_id
    return STORE_PREFIX + store_id


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def to_iso(value: Any) -> str:
    """Normalize an SDK timestamp (datetime, string or missing) to ISO text."""
    if value is None or value == "":
        return utc_now_iso()
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def to_int(value: Any, default: int | None = 0) -> int | None:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class FileSearchStore(CamelModel):
    name: str
    display_name: str
    create_time: str
    update_time: str
    active_documents_count: int = 0
    size_bytes: int = 0

    @classmethod
    def from_path(cls, store_id: str) -> "FileSearchStore":
        """
        Minimal descriptor built from a route parameter.
        The display name is not known server-side, so the id stands in for it.
        """
        now = utc_now_iso()
        return cls(name=store_id, display_name=store_id, create_time=now, update_time=now)

    @classmethod
    def from_sdk(cls, store: Any, fallback_display_name: str | None = None) -> "FileSearchStore":
        # Older API revisions spell the counter in the singular.
        active = getattr(store, "active_documents_count", None)
        if active is None:
            active = getattr(store, "active_document_count", None)
        return cls(
            name=extract_store_id(store.name),
            display_name=getattr(store, "display_name", None) or fallback_display_name or "",
            create_time=to_iso(getattr(store, "create_time", None)),
            update_time=to_iso(getattr(store, "update_time", None)),
            active_documents_count=to_int(active),
            size_bytes=to_int(getattr(store, "size_bytes", None)),
        )

    @property
    def full_name(self) -> str:
        return get_full_store_name(self.name)


class FileSearchDocument(CamelModel):
    name: str
    display_name: str
    create_time: str
    update_time: str
    metadata: dict[str, Any] | None = None
    mime_type: str | None = None
    size_bytes: int | None = None

    @classmethod
    def from_sdk(cls, doc: Any) -> "FileSearchDocument":
        display_name = getattr(doc, "display_name", None) or doc.name.split("/")[-1] or doc.name
        return cls(
            name=doc.name,
            display_name=display_name,
            create_time=to_iso(getattr(doc, "create_time", None)),
            update_time=to_iso(getattr(doc, "update_time", None)),
            metadata=_custom_metadata_to_dict(getattr(doc, "custom_metadata", None)),
            mime_type=getattr(doc, "mime_type", None),
            size_bytes=to_int(getattr(doc, "size_bytes", None), default=None),
        )


def _custom_metadata_to_dict(entries: Any) -> dict[str, Any] | None:
    if not entries:
        return None
    result = {}
    for entry in entries:
        if getattr(entry, "string_value", None) is not None:
            result[entry.key] = entry.string_value
        elif getattr(entry, "numeric_value", None) is not None:
            result[entry.key] = entry.numeric_value
        elif getattr(entry, "string_list_value", None) is not None:
            result[entry.key] = list(entry.string_list_value.values or [])
    return result


class QueryResponse(CamelModel):
    text: str = ""
    grounding_metadata: dict[str, Any] | None = None


class UploadOptions(CamelModel):
    display_name: str | None = None
    mime_type: str | None = None
    custom_metadata: list[dict[str, Any]] | None = None
    max_tokens_per_chunk: int = 500
    max_overlap_tokens: int = 50
