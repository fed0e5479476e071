# backend/app/services/upload_service.py
"""
Almacenamiento de imágenes subidas desde el panel.

Los ficheros se guardan en settings.UPLOAD_DIR con el nombre
"<milisegundos>-<nombre saneado>" y se sirven públicamente bajo /uploads/.
"""

import logging
import re
import time
from pathlib import Path
from typing import Optional

from fastapi import HTTPException, UploadFile
from starlette import status

from app.core.config import settings

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".avif": "image/avif",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def sanitize_filename(filename: str) -> str:
    """Nombre base del fichero con cualquier carácter fuera de [A-Za-z0-9._-] sustituido por '-'."""
    name = Path(filename.replace("\\", "/")).name
    name = re.sub(r"[^A-Za-z0-9._-]+", "-", name).strip("-.")
    return name or "file"


def content_type_for(path: Path) -> str:
    return CONTENT_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)


async def save_upload(file: Optional[UploadFile]) -> str:
    """
    Valida y guarda un fichero subido.

    Returns:
        La ruta pública, p. ej. "/uploads/1718000000000-jarron.png"

    Raises:
        HTTPException 400 si no hay fichero o la extensión no está permitida,
        413 si supera MAX_UPLOAD_SIZE
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

    file_ext = Path(file.filename).suffix.lower()
    if file_ext not in settings.ALLOWED_UPLOAD_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type. Allowed: {', '.join(settings.ALLOWED_UPLOAD_EXTENSIONS)}",
        )

    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Max size: {settings.MAX_UPLOAD_SIZE // (1024 * 1024)} MB",
        )

    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    filename = f"{int(time.time() * 1000)}-{sanitize_filename(file.filename)}"
    try:
        (upload_dir / filename).write_bytes(file_content)
    except OSError:
        logger.exception(f"No se pudo guardar el fichero {filename}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to upload file")

    logger.info(f"Fichero subido: {filename} ({len(file_content)} bytes)")
    return f"/uploads/{filename}"


def resolve_upload(relative_path: str) -> Path:
    """
    Ruta absoluta de un fichero subido. Cualquier ruta que salga de UPLOAD_DIR
    o que no sea un fichero existente se trata como inexistente (404).
    """
    upload_dir = Path(settings.UPLOAD_DIR).resolve()
    candidate = (upload_dir / relative_path).resolve()

    if candidate != upload_dir and upload_dir not in candidate.parents:
        logger.warning(f"Ruta de fichero fuera del directorio de subidas: {relative_path}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    if not candidate.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return candidate
