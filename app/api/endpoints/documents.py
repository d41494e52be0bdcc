# app/api/endpoints/documents.py

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from app.api.deps import get_db_session
from app.core.exceptions import to_http
from app.core.rate_limiter import DOCUMENT_UPLOAD_LIMIT, candidate_key, limiter
from app.core.rbac import require_verified_candidate
from app.models.enums import DocumentType
from app.models.user import User
from app.schemas.registration import DocumentRead
from app.services.registration_service import (
    delete_candidate_document,
    list_documents,
    upload_candidate_document,
)

router = APIRouter(
    prefix="/api/registration/documents",
    tags=["Registration Wizard"]
)


# ------------------------------------------------------------
# LIST UPLOADED DOCUMENTS
# ------------------------------------------------------------
@router.get("", response_model=List[DocumentRead])
async def get_documents(
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    return await list_documents(session, current_user.id)


# ------------------------------------------------------------
# UPLOAD (photo / signature)
# ------------------------------------------------------------
@router.post("", response_model=DocumentRead, status_code=status.HTTP_201_CREATED)
@limiter.limit(DOCUMENT_UPLOAD_LIMIT, key_func=candidate_key)
async def upload_document(
    request: Request,
    document_type: DocumentType = Form(...),
    file: UploadFile = File(...),
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        return await upload_candidate_document(session, current_user.id, document_type.value, file)
    except ValueError as e:
        raise to_http(e)


# ------------------------------------------------------------
# DELETE
# ------------------------------------------------------------
@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: UUID,
    current_user: User = Depends(require_verified_candidate),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        await delete_candidate_document(session, current_user.id, document_id)
    except ValueError as e:
        raise to_http(e)
