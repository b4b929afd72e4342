"""
Chat model holding a conversation with its messages embedded as JSON.
"""

from sqlalchemy import JSON, Column, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class Chat(BaseModel):
    """
    Represents a chat owned by exactly one user.

    ``messages`` is the ordered list of ``{"role", "content", "timestamp"}``
    objects; it is replaced as a whole on every update.
    """

    __tablename__ = "chats"
    __table_args__ = (Index("idx_chats_user_updated", "user_id", "updated_at"),)

    user_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    messages = Column(JSON, default=list, nullable=False)
    model = Column(String(255), nullable=True)

    # Relationships
    user = relationship("User", back_populates="chats")
