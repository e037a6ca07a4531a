import mimetypes
import uuid
from pathlib import PurePosixPath
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.enums import FileType
from db.file import StoredFile

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def stored_filename(original: str) -> str:
    """Random name keeping the extension of the uploaded file."""
    extension = PurePosixPath(original).suffix
    return f"{uuid.uuid4()}{extension}"


def guess_content_type(filename: str, declared: Optional[str] = None) -> str:
    declared = (declared or "").strip().lower()
    if declared and declared != DEFAULT_CONTENT_TYPE:
        return declared
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or DEFAULT_CONTENT_TYPE


async def put_files(
    db: AsyncSession, file_type: FileType, files: Sequence[Tuple[str, bytes, str]]
) -> List[StoredFile]:
    """Store (filename, data, content type) triples in one commit."""
    stored = [
        StoredFile(key=StoredFile.make_key(file_type, filename), data=data, content_type=content_type)
        for filename, data, content_type in files
    ]
    db.add_all(stored)
    await db.commit()
    return stored


async def put_file(
    db: AsyncSession, file_type: FileType, filename: str, data: bytes, content_type: str
) -> StoredFile:
    [stored] = await put_files(db, file_type, [(filename, data, content_type)])
    return stored


async def get_file(db: AsyncSession, file_type: FileType, filename: str) -> Optional[StoredFile]:
    return await db.get(StoredFile, StoredFile.make_key(file_type, filename))


async def file_exists(db: AsyncSession, file_type: FileType, filename: str) -> bool:
    result = await db.execute(
        select(StoredFile.key).where(StoredFile.key == StoredFile.make_key(file_type, filename))
    )
    return result.scalar_one_or_none() is not None


async def delete_file(db: AsyncSession, file_type: FileType, filename: str) -> bool:
    stored = await get_file(db, file_type, filename)
    if stored is None:
        return False
    await db.delete(stored)
    await db.commit()
    return True
