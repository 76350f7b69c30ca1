"""
Chat model: a student's conversation with the AI career assistant.
"""
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.db.base import Base


class ChatSender(str, enum.Enum):
    USER = "user"
    AI = "ai"


class ChatMessageType(str, enum.Enum):
    TEXT = "text"
    SUGGESTION = "suggestion"
    INTERVIEW_PREP = "interview_prep"
    RESUME_ADVICE = "resume_advice"


class Chat(Base):
    __tablename__ = "chats"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    conversation_id = Column(String, unique=True, nullable=False, index=True)
    topic = Column(String, nullable=False, default="general")
    title = Column(String, nullable=False)

    messages = Column(JSON, nullable=False, default=list)  # [{sender, message, timestamp, type}]
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    student = relationship("User", backref="chats")

    __table_args__ = (
        Index("idx_chats_student_created", "student_id", "created_at"),
    )

    def __repr__(self):
        return f"<Chat(id={self.id}, conversation_id={self.conversation_id}, messages={len(self.messages or [])})>"
