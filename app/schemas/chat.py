"""
Pydantic schemas for the AI career chat.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from app.db.models.chat import ChatSender, ChatMessageType


def _not_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class ChatMessageCreate(BaseModel):
    message: str = Field(..., min_length=1, max_length=1000)
    conversation_id: Optional[str] = None
    topic: Optional[str] = Field(None, max_length=50)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class ChatMessage(BaseModel):
    sender: ChatSender
    message: str
    timestamp: datetime
    type: ChatMessageType = ChatMessageType.TEXT


class ChatSendResponse(BaseModel):
    conversation_id: str
    ai_response: str
    messages: List[ChatMessage]


class ConversationSummary(BaseModel):
    conversation_id: str
    title: str
    topic: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ConversationResponse(ConversationSummary):
    messages: List[ChatMessage]
    updated_at: Optional[datetime] = None


class InterviewQuestionsRequest(BaseModel):
    job_title: str = Field(..., min_length=1, max_length=200)
    skills: List[str] = Field(..., min_length=1)

    @field_validator("job_title")
    @classmethod
    def job_title_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class ResumeTextRequest(BaseModel):
    resume_text: str = Field(..., min_length=1, max_length=5000)

    @field_validator("resume_text")
    @classmethod
    def resume_text_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class JobAdviceRequest(BaseModel):
    job_description: str = Field(..., min_length=1, max_length=3000)

    @field_validator("job_description")
    @classmethod
    def job_description_not_blank(cls, v: str) -> str:
        return _not_blank(v)
