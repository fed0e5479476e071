# backend/app/db/models/user_model.py
"""
Usuarios del panel de administración.
"""

import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from app.db.database import Base, utcnow

class User(Base):
    __tablename__ = "users"

    id = Column(String(50), primary_key=True, default=lambda: uuid.uuid4().hex)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default="author")  # 'admin' | 'author'
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
