import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile

from src.api import errors
from src.api.dependencies import get_document_service, get_upload_service
from src.api.responses import error_response, success_response
from src.application.documents.documents import DocumentService
from src.application.documents.upload import UploadService, format_failures
from src.domains.file_search.errors import InvalidRequest
from src.domains.file_search.schemas import ApiResponse, DocumentList

router = APIRouter(prefix="/stores/{store_id}", tags=["documents"])
logger = logging.getLogger(__name__)


@router.get("/documents", response_model=ApiResponse)
async def list_documents(
    store_id: str,
    service: Annotated[DocumentService, Depends(get_document_service)],
):
    """
    List all documents in a store.
    """
    logger.info(f"Document list requested for store {store_id}")
    try:
        documents = await service.list_documents(store_id)
        return success_response(DocumentList(data=documents, count=len(documents)))
    except Exception as e:
        logger.error(f"Failed to list documents for {store_id}: {e}")
        return errors.LIST_DOCUMENTS.to_response(e)


@router.delete("/documents/{doc_name}", response_model=ApiResponse)
async def delete_document(
    store_id: str,
    doc_name: str,
    service: Annotated[DocumentService, Depends(get_document_service)],
):
    """
    Delete a document, addressed by its display name.
    """
    try:
        await service.delete_document(store_id, doc_name)
        return success_response(message="문서가 성공적으로 삭제되었습니다")
    except Exception as e:
        logger.error(f"Failed to delete document {doc_name}: {e}")
        return errors.DELETE_DOCUMENT.to_response(e)


@router.post("/upload", response_model=ApiResponse)
async def upload_documents(
    store_id: str,
    service: Annotated[UploadService, Depends(get_upload_service)],
    files: Annotated[list[UploadFile] | None, File()] = None,
    custom_metadata: Annotated[str | None, Form(alias="customMetadata")] = None,
):
    """
    Upload up to MAX_UPLOAD_FILES files to a store.
    Any failed file turns the whole response into a 400 carrying per-file results.
    """
    logger.info(f"Upload requested for store {store_id} ({len(files or [])} files)")
    try:
        summary = await service.upload(store_id, files or [], custom_metadata)
    except InvalidRequest as e:
        return error_response(400, str(e))
    except Exception as e:
        logger.error(f"Upload to {store_id} failed: {e}")
        return errors.UPLOAD.to_response(e)

    if summary.fail_count > 0:
        return error_response(400, format_failures(summary), data=summary)

    return success_response(
        summary,
        message=f"{summary.success_count}개 파일이 성공적으로 업로드되었습니다",
    )
