# backend/app/db/models/post_model.py
"""
Modelo de entradas del blog.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.db.database import Base, utcnow

class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    title = Column(String(255), nullable=False)
    content_md = Column(Text, nullable=False)
    image_path = Column(Text, nullable=True)
    # None mientras la entrada sea un borrador
    published_at = Column(DateTime(timezone=True), nullable=True)
    author_id = Column(String(50), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    author = relationship("User", back_populates="posts")

    def __repr__(self):
        return f"<Post(id={self.id}, slug='{self.slug}')>"
