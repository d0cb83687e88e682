"""Project document routes.

Files go to the object-storage bucket at ``{project_id}/{filename}``
(re-uploading the same name overwrites); metadata is kept in
``project_documents``.

Routes:
- POST /api/projects/{id}/documents - Upload a document (multipart)
- GET  /api/projects/{id}/documents - Uploaded documents, newest first
"""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.db.models import ProjectDocumentModel, ProjectModel
from nusadana.storage import StorageBackend, StorageError, document_key
from nusadana.web.auth import CurrentUser, require_user
from nusadana.web.dependencies import get_db_session, get_storage, load_project
from nusadana.web.models import DocumentOut

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["documents"])


@router.post("/projects/{project_id}/documents", response_model=DocumentOut, status_code=201)
async def upload_document(
    file: Optional[UploadFile] = File(None),
    document_type: Optional[str] = Form(None),
    current: CurrentUser = Depends(require_user),
    project: ProjectModel = Depends(load_project),
    session: AsyncSession = Depends(get_db_session),
    storage: StorageBackend = Depends(get_storage),
):
    """Store the uploaded bytes, then record the document metadata."""
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="File is required.")

    try:
        key = document_key(project.id, file.filename)
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    content = await file.read()
    content_type = file.content_type or "application/octet-stream"

    await storage.upload(key, content, content_type)

    document = ProjectDocumentModel(
        project_id=project.id,
        file_name=file.filename,
        file_path=key,
        document_type=document_type,
        content_type=content_type,
        size_bytes=len(content),
        uploaded_by=current.id,
    )
    session.add(document)
    await session.commit()

    logger.info(
        "document_uploaded",
        project_id=project.id,
        key=key,
        size=len(content),
        user_id=current.id,
    )
    return document


@router.get("/projects/{project_id}/documents", response_model=list[DocumentOut])
async def list_documents(
    project: ProjectModel = Depends(load_project),
    session: AsyncSession = Depends(get_db_session),
):
    result = await session.execute(
        select(ProjectDocumentModel)
        .where(ProjectDocumentModel.project_id == project.id)
        .order_by(ProjectDocumentModel.uploaded_at.desc(), ProjectDocumentModel.id.desc())
    )
    return result.scalars().all()
