# backend/app/schemas/auth_schema.py
"""
Esquemas de autenticación del panel.
"""

from pydantic import Field

from .base_schema import CamelModel


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    role: str


class LoginResponse(CamelModel):
    success: bool = True
    user: UserResponse
