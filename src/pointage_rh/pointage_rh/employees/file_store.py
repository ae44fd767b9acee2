from __future__ import annotations

import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Protocol

from ..core.exceptions import StoreUnavailable, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp"}


class FileStore(Protocol):
    def upload(self, data: bytes, content_type: str) -> str:
        """Store the bytes and return their public URL."""

        raise NotImplementedError

    def delete(self, reference: str) -> None:
        raise NotImplementedError


class LocalFileStore(FileStore):
    """Files under a local directory, served from ``public_base_url``."""

    def __init__(self, root_dir: str | Path, public_base_url: str):
        self._root = Path(root_dir)
        self._base_url = public_base_url.rstrip("/")

    def upload(self, data: bytes, content_type: str) -> str:
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise ValidationError(f"Type de fichier non supporté: {content_type}")
        if not data:
            raise ValidationError("Fichier vide")

        ext = mimetypes.guess_extension(content_type) or ""
        name = f"{uuid.uuid4().hex}{ext}"
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            (self._root / name).write_bytes(data)
        except OSError as e:
            raise StoreUnavailable(f"Échec de l'envoi du fichier: {e}") from e
        return f"{self._base_url}/{name}"

    def delete(self, reference: str) -> None:
        name = reference.rsplit("/", 1)[-1]
        if not name:
            return
        path = self._root / name
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Photo already gone: %s", path)
        except OSError as e:
            raise StoreUnavailable(f"Échec de la suppression du fichier: {e}") from e
