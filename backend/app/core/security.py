# backend/app/core/security.py
"""
Utilidades de seguridad: hash de contraseñas y tokens de sesión firmados.

El token de sesión es un JWT (HS256) que viaja en una cookie HttpOnly o,
alternativamente, en la cabecera Authorization: Bearer.
"""

import bcrypt
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError

from app.core.config import settings

ALGORITHM = "HS256"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Comprueba una contraseña contra su hash bcrypt."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Hash con formato inválido
        return False


def get_password_hash(password: str) -> str:
    """Genera el hash bcrypt de una contraseña."""
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Crea un token de sesión firmado con caducidad."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Devuelve el payload del token, o None si la firma o la caducidad no son válidas."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
