import logging
from typing import List, Tuple

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from core.auth import current_admin
from core.config import settings
from core.errors import RequestError
from db.database import get_async_session
from db.enums import FileType
from db.users import User
from services import files as files_service

logger = logging.getLogger(__name__)

router = APIRouter()

# one month
DOWNLOAD_CACHE_CONTROL = "max-age=2629746"


class FileRequestError(RequestError):
    pass


@router.post("/upload", response_model=List[Tuple[str, str]])
async def upload_files(
    request: Request,
    file_type: FileType,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    """Store every file of the multipart body; returns (original name, stored name) pairs.
    Nothing is stored when one of the files is rejected."""
    form = await request.form()
    result = []
    files = []
    for _field, value in form.multi_items():
        if not isinstance(value, UploadFile):
            continue
        original = value.filename or ""
        data = await value.read()
        if len(data) > settings.max_upload_size:
            raise FileRequestError(
                "FileTooLarge",
                f'File "{original}" is bigger than {settings.max_upload_size} bytes',
            )

        stored = files_service.stored_filename(original)
        content_type = files_service.guess_content_type(original, value.content_type)
        files.append((stored, data, content_type))
        result.append((original, stored))

    await files_service.put_files(db, file_type, files)
    for original, stored in result:
        logger.info('%s just uploaded a new file: "%s" -> "%s/%s"', admin, original, file_type.value, stored)
    return result


@router.get("/download/{file_type}/{filename}")
async def download_file(
    file_type: FileType,
    filename: str,
    db: AsyncSession = Depends(get_async_session),
):
    stored = await files_service.get_file(db, file_type, filename)
    if stored is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"The file you've asked doesn't exist: {filename}",
        )
    return Response(
        content=bytes(stored.data),
        media_type=stored.content_type,
        headers={"Cache-Control": DOWNLOAD_CACHE_CONTROL},
    )
