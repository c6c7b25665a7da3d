"""
Data Transfer Objects (DTOs) for API layer.
Separates API contracts from domain entities. JSON field names are camelCase.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for DTOs serialized with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DocumentDTO(CamelModel):
    """Document DTO for API responses. Extracted text itself is never returned."""
    id: str
    file_name: str
    original_name: str
    file_size: int
    content_type: str
    processing_status: str
    processing_error: Optional[str] = None
    has_extracted_text: bool
    created_at: datetime
    updated_at: datetime


class DocumentPageDTO(CamelModel):
    """A zero-based page of documents."""
    content: List[DocumentDTO]
    total_pages: int
    total_elements: int
    number: int
    size: int


class AnalysisDTO(CamelModel):
    """Analysis DTO; doubles as the job status payload."""
    id: str
    document_id: Optional[str] = None
    analysis_type: str
    status: str
    prompt: Optional[str] = None
    template_type: Optional[str] = None
    result: Optional[str] = None
    confidence_score: Optional[float] = None
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class ClauseDTO(CamelModel):
    id: str
    document_id: str
    analysis_id: Optional[str] = None
    clause_type: str
    clause_text: str
    plain_english_explanation: Optional[str] = None
    importance_level: str
    confidence_score: Optional[float] = None
    created_at: datetime


class QuestionRequestDTO(CamelModel):
    question: Optional[str] = None


class TemplateRequestDTO(CamelModel):
    template_type: Optional[str] = None
    requirements: Optional[str] = None


class MessageDTO(CamelModel):
    message: str
