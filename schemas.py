from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models import ApplicationStatus, QuestionType


# --- Profile ---
class ProfileSnapshot(BaseModel):
    """Plain copy of the job seeker fields the completeness meter reads."""

    model_config = ConfigDict(from_attributes=True)

    full_name: Optional[str] = None
    email: Optional[str] = None
    is_email_verified: bool = False
    phone: Optional[str] = None
    address: Optional[str] = None
    experience_level: Optional[str] = None
    profile_photo_file_name: Optional[str] = None
    resume_file_name: Optional[str] = None
    summary: Optional[str] = None


# --- Questions & Responses ---
class QuestionSpec(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    text: str = ""
    type: QuestionType = QuestionType.TEXT
    is_required: bool = False
    options: Optional[str] = None
    max_length: Optional[int] = None
    order: int = 0

    @property
    def option_list(self) -> List[str]:
        if not self.options:
            return []
        return [o.strip() for o in self.options.split(",") if o.strip()]


class QuestionResponseDraft(BaseModel):
    """A response that does not exist in the store yet."""

    id: str
    question_id: str
    answer: str = ""


class QuestionAnswerView(BaseModel):
    question_id: str
    question_text: str
    type: QuestionType
    is_required: bool
    options: List[str] = Field(default_factory=list)
    max_length: Optional[int] = None
    answer: Optional[str] = None


class ApplicationForm(BaseModel):
    application_id: str
    job_id: str
    job_title: Optional[str] = None
    cover_letter: Optional[str] = None
    status: ApplicationStatus
    question_set_name: Optional[str] = None
    questions: List[QuestionAnswerView] = Field(default_factory=list)
    completeness_rate: float = 0.0

    @property
    def has_questions(self) -> bool:
        return len(self.questions) > 0


class StoredResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    question_id: str
    answer: str
    responded_at: Optional[datetime] = None


class ReconcileOutcome(BaseModel):
    """Result of saving answers: either the stored responses or per-position errors."""

    application_id: str
    success: bool
    responses: List[StoredResponse] = Field(default_factory=list)
    created_ids: List[str] = Field(default_factory=list)
    errors: Dict[int, List[str]] = Field(default_factory=dict)
    # Trimmed answers as submitted, for re-presenting the form on failure
    answers: List[str] = Field(default_factory=list)


class ApplicationSubmission(BaseModel):
    success: bool
    application_id: Optional[str] = None
    job_id: str
    responses: List[StoredResponse] = Field(default_factory=list)
    errors: Dict[int, List[str]] = Field(default_factory=dict)
    answers: List[str] = Field(default_factory=list)
