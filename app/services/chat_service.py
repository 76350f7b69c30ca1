"""
AI career chat for students.

Conversations are stored per student with their full message log. Each reply
is generated from the system prompt plus the most recent turns of the
conversation. A provider failure stores nothing, so the user message is never
kept without its reply.
"""
import json
import logging
import secrets
import time
from typing import Optional, List

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ProviderError
from app.db.models.chat import Chat, ChatSender, ChatMessageType
from app.db.models.user import User
from app.llm.provider import LLMProvider
from app.llm.router import get_model_for_feature
from app.schemas.chat import ChatMessageCreate
from app.services.common import utcnow

logger = logging.getLogger(__name__)

# stored turns sent back to the model as context
HISTORY_WINDOW = 10
CONVERSATION_LIST_LIMIT = 20

CHAT_SYSTEM_PROMPT = """You are an AI Career Assistant for college students preparing for campus placements.
Topic: {topic}

- Respond clearly and concisely
- Be helpful and professional
- Keep responses under 500 words
- Use bullet points when they help
- Be specific and actionable"""

QUESTIONS_PROMPT = """Generate 5 detailed interview questions for a {job_title} position.
Focus on these skills: {skills}.

For each question:
1. Include both technical and behavioral questions
2. Provide brief answer hints
3. Explain why this question is asked
4. Make questions specific to the role

Format as a numbered list with clear separation."""

RESUME_FEEDBACK_PROMPT = """Analyze this resume and provide detailed feedback:

Resume:
{resume_text}

Please provide:
1. **Key Strengths** (3-4 specific strengths with examples)
2. **Areas for Improvement** (3-4 specific weaknesses with solutions)
3. **Specific Enhancement Suggestions** (concrete changes to make)
4. **Overall Assessment** (1-2 sentence summary)
5. **Action Items** (prioritized list of changes)

Be specific and actionable. Reference actual content from the resume."""

JOB_MATCHING_PROMPT = """Compare this student profile with the job description and provide a matching analysis.

Student Profile:
{profile}

Job Description:
{job_description}

Provide:
1. **Match Score** (0-10 with explanation)
2. **Matching Points** (3-4 areas where the student matches the role)
3. **Skill Gaps** (2-3 skills the student needs to develop)
4. **Improvement Recommendations** (specific steps to improve fit)
5. **Overall Recommendation** (should the student apply?)

Be honest but constructive."""


def build_conversation_id(student_id: int, epoch_ms: Optional[int] = None) -> str:
    if epoch_ms is None:
        epoch_ms = int(time.time() * 1000)
    return f"conv_{student_id}_{epoch_ms}_{secrets.token_hex(4)}"


def _require_provider(provider: Optional[LLMProvider]) -> LLMProvider:
    if provider is None:
        raise ProviderError("AI career chat is not configured")
    return provider


def _reply(provider: Optional[LLMProvider], messages: List[dict], feature: str) -> str:
    response = _require_provider(provider).chat(
        messages,
        model=get_model_for_feature(feature),
        temperature=0.7,
        max_tokens=1000,
    )
    content = (response.content or "").strip()
    if not content:
        raise ProviderError("Empty response from AI service")
    return content


def _ask(provider: Optional[LLMProvider], prompt: str, topic: str, feature: str) -> str:
    messages = [
        {"role": "system", "content": CHAT_SYSTEM_PROMPT.format(topic=topic)},
        {"role": "user", "content": prompt},
    ]
    return _reply(provider, messages, feature)


def _message(sender: ChatSender, text: str) -> dict:
    return {
        "sender": sender.value,
        "message": text,
        "timestamp": utcnow().isoformat(),
        "type": ChatMessageType.TEXT.value,
    }


def _context_messages(chat: Chat, message: str) -> List[dict]:
    messages = [{"role": "system", "content": CHAT_SYSTEM_PROMPT.format(topic=chat.topic)}]
    for turn in (chat.messages or [])[-HISTORY_WINDOW:]:
        role = "assistant" if turn["sender"] == ChatSender.AI.value else "user"
        messages.append({"role": role, "content": turn["message"]})
    messages.append({"role": "user", "content": message})
    return messages


# ============================================
# Conversations
# ============================================

def send_message(
    db: Session,
    student: User,
    provider: Optional[LLMProvider],
    data: ChatMessageCreate,
) -> Chat:
    """
    Append a user message and the AI reply to a conversation.

    An unknown or foreign ``conversation_id`` starts a new conversation.

    Raises:
        ProviderError / ProviderTimeoutError: no usable reply; nothing is stored
    """
    chat = None
    if data.conversation_id:
        chat = db.query(Chat).filter(
            Chat.conversation_id == data.conversation_id,
            Chat.student_id == student.id,
        ).first()

    is_new = chat is None
    if is_new:
        chat = Chat(
            student_id=student.id,
            conversation_id=build_conversation_id(student.id),
            topic=data.topic or "general",
            title=f"Chat - {utcnow().date().isoformat()}",
            messages=[],
            is_active=True,
        )

    reply = _reply(provider, _context_messages(chat, data.message), "career_chat")

    chat.messages = list(chat.messages or []) + [
        _message(ChatSender.USER, data.message),
        _message(ChatSender.AI, reply),
    ]
    if is_new:
        db.add(chat)
    db.commit()
    db.refresh(chat)

    logger.info(
        f"Chat message answered: conversation_id={chat.conversation_id}, "
        f"student_id={student.id}, new={is_new}, messages={len(chat.messages)}"
    )
    return chat


def list_conversations(db: Session, student: User) -> List[Chat]:
    return (
        db.query(Chat)
        .filter(Chat.student_id == student.id)
        .order_by(Chat.created_at.desc(), Chat.id.desc())
        .limit(CONVERSATION_LIST_LIMIT)
        .all()
    )


def get_conversation(db: Session, student: User, conversation_id: str) -> Chat:
    chat = db.query(Chat).filter(
        Chat.conversation_id == conversation_id,
        Chat.student_id == student.id,
    ).first()
    if not chat:
        raise NotFoundError("Conversation not found")
    return chat


def delete_conversation(db: Session, student: User, conversation_id: str) -> None:
    chat = get_conversation(db, student, conversation_id)
    db.delete(chat)
    db.commit()
    logger.info(f"Conversation deleted: conversation_id={conversation_id}, student_id={student.id}")


# ============================================
# One-shot helpers
# ============================================

def generate_interview_questions(provider: Optional[LLMProvider], job_title: str, skills: List[str]) -> str:
    prompt = QUESTIONS_PROMPT.format(job_title=job_title, skills=", ".join(skills))
    return _ask(provider, prompt, "interview", "interview_questions")


def review_resume_text(provider: Optional[LLMProvider], resume_text: str) -> str:
    return _ask(provider, RESUME_FEEDBACK_PROMPT.format(resume_text=resume_text), "resume", "resume_feedback")


def job_matching_advice(provider: Optional[LLMProvider], student: User, job_description: str) -> str:
    prompt = JOB_MATCHING_PROMPT.format(
        profile=json.dumps(student.student_profile or {}, indent=2),
        job_description=job_description,
    )
    return _ask(provider, prompt, "job-matching", "job_matching")
