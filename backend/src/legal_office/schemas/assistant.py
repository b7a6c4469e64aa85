"""
Schemas for the legal assistant, prompts, predefined responses, AI settings
and the document generator.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from legal_office.core.constants import MAX_PROMPT_LENGTH

AIMode = Literal["glm4", "gemini", "predefined"]
DocumentTemplateType = Literal["defense", "lawsuit", "objection", "notice"]


class FormattedBlock(BaseModel):
    """One block of formatted legal content."""
    type: Literal["title", "article", "section", "warning", "text"]
    content: str
    items: List[str] = Field(default_factory=list)


# Assistant conversation
class ChatMessageCreate(BaseModel):
    content: str = Field(..., max_length=10000, description="Message text; surrounding whitespace is ignored")


class TemplateMessageRequest(ChatMessageCreate):
    """Content sent with one of the legal templates as system prompt."""


class ChatMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    content: str
    sender: str
    feedback: Optional[Dict[str, Any]] = None
    error: bool = False
    formatted_content: Optional[List[FormattedBlock]] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None


class ChatExchangeResponse(BaseModel):
    user_message: ChatMessageResponse
    ai_message: ChatMessageResponse


class FeedbackRequest(BaseModel):
    is_correct: bool
    correction: Optional[str] = Field(None, max_length=10000)


# Prompts
class PromptCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=MAX_PROMPT_LENGTH)
    is_default: bool = False


class PromptUpdate(BaseModel):
    content: Optional[str] = Field(None, min_length=1, max_length=MAX_PROMPT_LENGTH)
    is_default: Optional[bool] = None


class PromptResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    content: str
    is_default: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# Predefined responses
class PredefinedResponseCreate(BaseModel):
    response: str = Field(..., min_length=1, max_length=10000)
    processing_time: float = Field(0.0, ge=0, description="Seconds the answer nominally took")
    valid_until: Optional[datetime] = None


class PredefinedResponseUpdate(BaseModel):
    response: Optional[str] = Field(None, min_length=1, max_length=10000)
    processing_time: Optional[float] = Field(None, ge=0)
    valid_until: Optional[datetime] = None


class PredefinedResponseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    response: str
    processing_time: float
    valid_until: Optional[str] = None
    created_at: Optional[str] = None


# AI settings
class AISettingsUpdate(BaseModel):
    ai_mode: Optional[AIMode] = None
    model: Optional[str] = Field(None, min_length=1, max_length=100)
    system_prompt: Optional[str] = Field(None, min_length=1, max_length=10000)
    temperature: Optional[float] = Field(None, ge=0, le=2)
    top_p: Optional[float] = Field(None, ge=0, le=1)
    max_tokens: Optional[int] = Field(None, ge=1, le=8192)
    timeout_seconds: Optional[float] = Field(None, ge=1, le=600)
    max_retries: Optional[int] = Field(None, ge=0, le=10)
    glm_api_key: Optional[str] = Field(None, description="Empty string removes the stored key")
    gemini_api_key: Optional[str] = Field(None, description="Empty string removes the stored key")


class AISettingsResponse(BaseModel):
    ai_mode: str
    model: str
    system_prompt: str
    temperature: float
    top_p: float
    max_tokens: int
    timeout_seconds: float
    max_retries: int
    has_glm_api_key: bool
    has_gemini_api_key: bool
    updated_at: Optional[str] = None


# Document generator
class DocumentGenerateRequest(BaseModel):
    type: DocumentTemplateType
    opponent: str = Field("", max_length=255)
    court: str = Field("", max_length=255)
    case_number: str = Field("", max_length=50)
    facts: str = Field("", max_length=10000)
    requests: str = Field("", max_length=10000)
    notes: str = Field("", max_length=10000)
    save: bool = False
    title: Optional[str] = Field(None, max_length=255)
    case_id: Optional[str] = None


class DocumentGenerateResponse(BaseModel):
    content: str
    prompt: str
    document_id: Optional[str] = None
