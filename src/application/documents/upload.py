import io
import json
import logging
from typing import Any

from fastapi import UploadFile

from src.core.config.settings import settings
from src.domains.file_search.errors import InvalidRequest, error_message
from src.domains.file_search.models import FileSearchStore, UploadOptions
from src.domains.file_search.schemas import UploadFileResult, UploadSummary
from src.services.gemini import DEFAULT_MIME_TYPE, GeminiFileSearchClient, guess_mime_type

logger = logging.getLogger(__name__)


def parse_custom_metadata(raw: str | None) -> list[dict[str, Any]]:
    """
    Convert the form's ``[{key, value, type}]`` JSON into API metadata entries.
    ``type`` is ``number``, ``stringList`` (comma separated) or a plain string.
    Malformed input is logged and ignored.
    """
    if not raw:
        return []

    try:
        entries = []
        for meta in json.loads(raw):
            entry: dict[str, Any] = {"key": meta["key"]}
            if meta.get("type") == "number":
                entry["numeric_value"] = float(meta["value"])
            elif meta.get("type") == "stringList":
                values = [v.strip() for v in str(meta["value"]).split(",")]
                entry["string_list_value"] = {"values": [v for v in values if v]}
            else:
                entry["string_value"] = str(meta["value"])
            entries.append(entry)
        return entries
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logger.error(f"Failed to parse customMetadata: {e}")
        return []


def format_failures(summary: UploadSummary) -> str:
    failed = "\n".join(
        f"• {r.file_name}: {r.error}" for r in summary.results if not r.success
    )
    return f"{summary.fail_count}개 파일 업로드 실패:\n\n{failed}"


class UploadService:
    def __init__(self, gemini: GeminiFileSearchClient):
        self.gemini = gemini

    async def upload(
        self,
        store_id: str,
        files: list[UploadFile],
        custom_metadata: str | None = None,
    ) -> UploadSummary:
        """
        Upload files to a store one by one.
        A failing file is recorded in the summary and does not stop the rest.
        """
        if not files:
            raise InvalidRequest("파일이 없습니다")
        if len(files) > settings.MAX_UPLOAD_FILES:
            raise InvalidRequest(
                f"최대 {settings.MAX_UPLOAD_FILES}개의 파일만 업로드 가능합니다"
            )

        store = FileSearchStore.from_path(store_id)
        metadata = parse_custom_metadata(custom_metadata)

        summary = UploadSummary()
        for file in files:
            result = await self._upload_one(store, file, metadata)
            summary.results.append(result)
            if result.success:
                summary.success_count += 1
            else:
                summary.fail_count += 1

        return summary

    async def _upload_one(
        self, store: FileSearchStore, file: UploadFile, metadata: list[dict[str, Any]]
    ) -> UploadFileResult:
        file_name = file.filename or "file"
        content = await file.read()

        if len(content) > settings.MAX_FILE_SIZE_BYTES:
            return UploadFileResult(
                file_name=file_name,
                success=False,
                error=f"파일 크기가 {settings.MAX_FILE_SIZE_MB}MB를 초과합니다",
            )

        mime_type = file.content_type
        if not mime_type or mime_type == DEFAULT_MIME_TYPE:
            mime_type = guess_mime_type(file_name)

        logger.info(f"Preparing upload: {file_name} ({len(content)} bytes, {mime_type})")
        try:
            await self.gemini.upload_document(
                store,
                io.BytesIO(content),
                UploadOptions(
                    display_name=file_name,
                    mime_type=mime_type,
                    custom_metadata=metadata or None,
                    max_tokens_per_chunk=settings.MAX_TOKENS_PER_CHUNK,
                    max_overlap_tokens=settings.MAX_OVERLAP_TOKENS,
                ),
            )
        except Exception as e:
            logger.error(f"Upload failed for {file_name}: {e}", exc_info=True)
            return UploadFileResult(
                file_name=file_name,
                success=False,
                error=error_message(e) or "업로드 중 오류가 발생했습니다",
            )

        logger.info(f"Upload complete: {file_name}")
        return UploadFileResult(file_name=file_name, success=True)
