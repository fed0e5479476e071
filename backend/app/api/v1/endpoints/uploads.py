"""
Subida de imágenes desde el panel y servicio público de los ficheros subidos.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse

from app.api import deps
from app.db.models.user_model import User
from app.services import upload_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/upload")
async def upload_file(
    file: Optional[UploadFile] = File(default=None),
    current_user: User = Depends(deps.get_current_user),
) -> dict:
    """Guarda el fichero del campo multipart `file` y devuelve su ruta pública."""
    path = await upload_service.save_upload(file)
    return {"path": path}


@router.get("/uploads/{file_path:path}")
async def serve_upload(file_path: str) -> FileResponse:
    """Sirve un fichero subido con el tipo de contenido según su extensión."""
    absolute_path = upload_service.resolve_upload(file_path)
    return FileResponse(absolute_path, media_type=upload_service.content_type_for(absolute_path))
