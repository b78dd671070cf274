# marketplace/services/image_service.py
"""
Image storage on the local filesystem.

One image per entity, saved as <UPLOAD_DIR>/<folder>/<type>-<id><ext>.
Whether an entity "has an image" is simply whether that file exists.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from fastapi import HTTPException

from marketplace.config.settings import MAX_UPLOAD_BYTES, UPLOAD_DIR

logger = logging.getLogger(__name__)

IMAGE_FOLDERS = {
    "substance": "substances",
    "inventory": "inventory",
    "dealer": "dealers",
    "customer": "customers",
    "provider": "providers",
}

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


class ImageService:
    """Save, find and delete entity images under a base directory."""

    def __init__(self, base_dir: str = UPLOAD_DIR, max_bytes: int = MAX_UPLOAD_BYTES):
        self.base_dir = Path(base_dir)
        self.max_bytes = max_bytes

    def ensure_dirs(self) -> None:
        for folder in IMAGE_FOLDERS.values():
            (self.base_dir / folder).mkdir(parents=True, exist_ok=True)

    def _folder(self, kind: str) -> Path:
        if kind not in IMAGE_FOLDERS:
            raise HTTPException(status_code=400, detail="Invalid type")
        return self.base_dir / IMAGE_FOLDERS[kind]

    def _find(self, kind: str, entity_id: int) -> Optional[Path]:
        folder = self._folder(kind)
        if not folder.is_dir():
            return None
        prefix = f"{kind}-{entity_id}."
        for path in sorted(folder.iterdir()):
            if path.name.startswith(prefix):
                return path
        return None

    async def validate_image_file(self, file_content: bytes, filename: Optional[str],
                                  content_type: Optional[str] = None) -> str:
        """Check extension, mime type, size and magic bytes. Returns the normalised extension."""
        ext = os.path.splitext(filename or "")[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise HTTPException(status_code=400, detail="Only image files are allowed (jpeg, jpg, png, gif, webp)")
        if content_type and not content_type.startswith("image/"):
            raise HTTPException(status_code=400, detail="Only image files are allowed (jpeg, jpg, png, gif, webp)")
        if not file_content:
            raise HTTPException(status_code=400, detail="No image file provided")
        if len(file_content) > self.max_bytes:
            raise HTTPException(status_code=400, detail=f"Image exceeds {self.max_bytes // (1024 * 1024)}MB limit")
        if not self._is_valid_image_header(file_content):
            raise HTTPException(status_code=400, detail="File is not a valid image")
        return ext

    def _is_valid_image_header(self, file_content: bytes) -> bool:
        if len(file_content) < 12:
            return False
        if file_content.startswith(b"\xff\xd8\xff"):
            return True
        if file_content.startswith(b"\x89PNG\r\n\x1a\n"):
            return True
        if file_content.startswith((b"GIF87a", b"GIF89a")):
            return True
        if file_content[:4] == b"RIFF" and file_content[8:12] == b"WEBP":
            return True
        return False

    async def save_image(self, file_content: bytes, filename: Optional[str], kind: str, entity_id: int,
                         content_type: Optional[str] = None) -> str:
        ext = await self.validate_image_file(file_content, filename, content_type)
        folder = self._folder(kind)
        folder.mkdir(parents=True, exist_ok=True)

        # replaces an image saved under another extension
        self.delete_image(kind, entity_id)

        target = folder / f"{kind}-{entity_id}{ext}"
        target.write_bytes(file_content)
        logger.info(f"Saved image: {target.name}")
        return self.url_for(kind, target.name)

    def delete_image(self, kind: str, entity_id: int) -> bool:
        removed = False
        path = self._find(kind, entity_id)
        while path is not None:
            path.unlink()
            logger.info(f"Deleted image: {path.name}")
            removed = True
            path = self._find(kind, entity_id)
        return removed

    def get_image_url(self, kind: str, entity_id: int) -> Optional[str]:
        path = self._find(kind, entity_id)
        return self.url_for(kind, path.name) if path else None

    def image_exists(self, kind: str, entity_id: int) -> bool:
        return self._find(kind, entity_id) is not None

    @staticmethod
    def url_for(kind: str, filename: str) -> str:
        return f"/uploads/{IMAGE_FOLDERS[kind]}/{filename}"


image_service = ImageService()
