import logging
import os
import random
import re
import time
from typing import BinaryIO
from pydantic import BaseModel

from ngohub.core.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_TYPES = re.compile(r"jpeg|jpg|png|pdf|doc|docx")
CHUNK_SIZE = 64 * 1024


class StoredFile(BaseModel):
    filename: str
    original_name: str
    size: int
    url: str


class FileStorage:
    """Keeps uploaded images and documents on local disk under `upload_dir`."""

    def __init__(self, upload_dir: str, max_bytes: int):
        self.upload_dir = upload_dir
        self.max_bytes = max_bytes

    @staticmethod
    def is_allowed(filename: str, content_type: str | None) -> bool:
        extension = os.path.splitext(filename)[1].lower()
        return bool(ALLOWED_TYPES.search(extension)) and bool(ALLOWED_TYPES.search(content_type or ""))

    def save(self, field_name: str, filename: str, content_type: str | None, stream: BinaryIO) -> StoredFile:
        if not self.is_allowed(filename, content_type):
            raise ValidationError("Only images and documents allowed")

        os.makedirs(self.upload_dir, exist_ok=True)
        extension = os.path.splitext(filename)[1]
        stored_name = f"{field_name}-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{extension}"
        path = os.path.join(self.upload_dir, stored_name)

        size = 0
        try:
            with open(path, "wb") as out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise ValidationError(
                            f"File {filename} exceeds the {self.max_bytes // (1024 * 1024)}MB limit"
                        )
                    out.write(chunk)
        except Exception:
            self.delete(stored_name)
            raise

        logger.info(f"Stored upload {filename} as {stored_name} ({size} bytes)")
        return StoredFile(
            filename=stored_name,
            original_name=filename,
            size=size,
            url=f"/uploads/{stored_name}"
        )

    def delete(self, *filenames: str):
        """Removes stored uploads, e.g. when the request that brought them fails."""
        for filename in filenames:
            path = os.path.join(self.upload_dir, os.path.basename(filename))
            try:
                os.remove(path)
            except FileNotFoundError:
                pass
            else:
                logger.info(f"Removed upload {filename}")
