"""
AI career chat endpoints. Students only; conversations are scoped to their owner.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, require_roles
from app.db.models.user import User
from app.llm.provider import LLMProvider
from app.llm.router import get_llm_provider
from app.schemas.chat import (
    ChatMessageCreate,
    ChatSendResponse,
    ConversationSummary,
    ConversationResponse,
    InterviewQuestionsRequest,
    ResumeTextRequest,
    JobAdviceRequest,
)
from app.services import chat_service

router = APIRouter(prefix="/ai-chat", tags=["AI Chat"])

current_student = require_roles("student")


# ============================================
# ✅ CONVERSATIONS
# ============================================

@router.post("/send-message", response_model=ChatSendResponse)
def send_message(
    data: ChatMessageCreate,
    student: User = Depends(current_student),
    provider: Optional[LLMProvider] = Depends(get_llm_provider),
    db: Session = Depends(get_db)
):
    chat = chat_service.send_message(db, student, provider, data)
    return ChatSendResponse(
        conversation_id=chat.conversation_id,
        ai_response=chat.messages[-1]["message"],
        messages=chat.messages,
    )


@router.get("/conversations", response_model=List[ConversationSummary])
def list_conversations(student: User = Depends(current_student), db: Session = Depends(get_db)):
    return chat_service.list_conversations(db, student)


@router.get("/conversation/{conversation_id}", response_model=ConversationResponse)
def get_conversation(conversation_id: str, student: User = Depends(current_student), db: Session = Depends(get_db)):
    return chat_service.get_conversation(db, student, conversation_id)


@router.delete("/conversation/{conversation_id}")
def delete_conversation(conversation_id: str, student: User = Depends(current_student), db: Session = Depends(get_db)):
    chat_service.delete_conversation(db, student, conversation_id)
    return {"message": "Conversation deleted"}


# ============================================
# ✅ ONE-SHOT ADVICE
# ============================================

@router.post("/generate-questions")
def generate_questions(
    data: InterviewQuestionsRequest,
    student: User = Depends(current_student),
    provider: Optional[LLMProvider] = Depends(get_llm_provider)
):
    return {"questions": chat_service.generate_interview_questions(provider, data.job_title, data.skills)}


@router.post("/analyze-resume")
def analyze_resume(
    data: ResumeTextRequest,
    student: User = Depends(current_student),
    provider: Optional[LLMProvider] = Depends(get_llm_provider)
):
    return {"analysis": chat_service.review_resume_text(provider, data.resume_text)}


@router.post("/job-matching-advice")
def job_matching_advice(
    data: JobAdviceRequest,
    student: User = Depends(current_student),
    provider: Optional[LLMProvider] = Depends(get_llm_provider)
):
    return {"advice": chat_service.job_matching_advice(provider, student, data.job_description)}
