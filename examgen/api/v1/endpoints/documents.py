from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ...dependencies import get_content_extractor, get_file_storage, get_session_store
from ..constants import ErrorMessages, ResponseMessages
from ..schemas import AddDocumentResponse, DocumentsResponse, UploadMultipleResponse, UploadResponse
from ....config import get_settings
from ....exceptions import UploadRejectedError
from ....models.document import Document
from ....services.content_extractor import ContentExtractor
from ....services.file_storage import FileStorageService
from ....services.session_store import SessionStore

logger = structlog.get_logger(__name__)

router = APIRouter()


async def _ingest(
    upload: UploadFile,
    file_storage: FileStorageService,
    extractor: ContentExtractor
) -> Document:
    """Store one upload and extract it; the stored file is removed if extraction fails."""
    stored = await file_storage.store_file(upload)
    try:
        return await extractor.extract(stored.path, stored.content_type, stored.original_name)
    except Exception:
        file_storage.delete_files([stored.path])
        raise


@router.post("/upload", response_model=UploadResponse)
async def upload_document(
    document: Optional[UploadFile] = File(None),
    file_storage: FileStorageService = Depends(get_file_storage),
    extractor: ContentExtractor = Depends(get_content_extractor),
    session_store: SessionStore = Depends(get_session_store)
):
    if document is None or not document.filename:
        raise HTTPException(status_code=400, detail=ErrorMessages.NO_FILE)

    try:
        extracted = await _ingest(document, file_storage, extractor)
        session = await session_store.create([extracted])

        logger.info(
            "session_created",
            session_id=session.session_id,
            file_name=extracted.file_name,
            content_length=extracted.content_length
        )

        return UploadResponse(
            session_id=session.session_id,
            message=ResponseMessages.FILE_UPLOADED,
            content_length=extracted.content_length,
            visual_elements_count=len(extracted.visual_elements)
        )

    except UploadRejectedError:
        raise
    except Exception as e:
        logger.error("Upload error", file_name=document.filename, error=str(e))
        raise HTTPException(status_code=500, detail=ErrorMessages.FILE_PROCESSING)


@router.post("/upload-multiple", response_model=UploadMultipleResponse)
async def upload_multiple_documents(
    documents: Optional[List[UploadFile]] = File(None),
    file_storage: FileStorageService = Depends(get_file_storage),
    extractor: ContentExtractor = Depends(get_content_extractor),
    session_store: SessionStore = Depends(get_session_store)
):
    uploads = [upload for upload in (documents or []) if upload.filename]
    if not uploads:
        raise HTTPException(status_code=400, detail=ErrorMessages.NO_FILES)

    max_files = get_settings().max_files_per_upload
    if len(uploads) > max_files:
        raise HTTPException(status_code=400, detail=f"{ErrorMessages.TOO_MANY_FILES} (max: {max_files})")

    try:
        extracted: List[Document] = []
        for upload in uploads:
            try:
                extracted.append(await _ingest(upload, file_storage, extractor))
            except Exception as e:
                logger.error("Error processing file, skipping", file_name=upload.filename, error=str(e))

        session = await session_store.create(extracted, multi_document=True)
        summaries = [doc.summary() for doc in session.documents]

        logger.info(
            "multi_document_session_created",
            session_id=session.session_id,
            uploaded=len(uploads),
            processed=len(summaries)
        )

        return UploadMultipleResponse(
            session_id=session.session_id,
            message=ResponseMessages.FILES_UPLOADED,
            documents=summaries,
            total_documents=len(summaries),
            total_content_length=len(session.content)
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Multiple upload error", error=str(e))
        raise HTTPException(status_code=500, detail=ErrorMessages.FILES_PROCESSING)


@router.post("/add-document/{session_id}", response_model=AddDocumentResponse)
async def add_document(
    session_id: str,
    document: Optional[UploadFile] = File(None),
    file_storage: FileStorageService = Depends(get_file_storage),
    extractor: ContentExtractor = Depends(get_content_extractor),
    session_store: SessionStore = Depends(get_session_store)
):
    session = await session_store.get(session_id)
    if session is None or not session.multi_document:
        raise HTTPException(status_code=404, detail=ErrorMessages.MULTI_DOCUMENT_SESSION_NOT_FOUND)

    if document is None or not document.filename:
        raise HTTPException(status_code=400, detail=ErrorMessages.NO_FILE)

    try:
        extracted = await _ingest(document, file_storage, extractor)

        async with session_store.lock(session_id):
            session.add_document(extracted)
            await session_store.save(session)
            total_documents = len(session.documents)

        logger.info("document_added", session_id=session_id, file_name=extracted.file_name,
                    total_documents=total_documents)

        return AddDocumentResponse(
            message=ResponseMessages.DOCUMENT_ADDED,
            document=extracted.summary(),
            total_documents=total_documents
        )

    except UploadRejectedError:
        raise
    except Exception as e:
        logger.error("Add document error", session_id=session_id, error=str(e))
        raise HTTPException(status_code=500, detail=ErrorMessages.ADD_DOCUMENT)


@router.get("/documents/{session_id}", response_model=DocumentsResponse)
async def get_documents(
    session_id: str,
    session_store: SessionStore = Depends(get_session_store)
):
    session = await session_store.get(session_id)
    if session is None or not session.multi_document:
        raise HTTPException(status_code=404, detail=ErrorMessages.MULTI_DOCUMENT_SESSION_NOT_FOUND)

    summaries = [doc.summary() for doc in session.documents]
    return DocumentsResponse(
        session_id=session_id,
        documents=summaries,
        total_documents=len(summaries),
        total_content_length=len(session.content)
    )
