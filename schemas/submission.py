"""Form submission schemas: raw request, normalized submission, validated lead."""
import uuid
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SubmissionRequest(BaseModel):
    """Raw field set posted by the website form."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    company: str = Field(min_length=1)
    industry: Optional[str] = None
    service_type: Optional[str] = None
    message: Optional[str] = None
    subject: Optional[str] = None


class Submission(BaseModel):
    """A submission after intake normalization. Never persisted verbatim."""

    submission_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company_name: Optional[str] = None
    industry: Optional[str] = None
    service_type: Optional[str] = None
    needs_description: Optional[str] = None
    subject: Optional[str] = None

    @classmethod
    def from_request(cls, request: SubmissionRequest) -> "Submission":
        return cls(
            full_name=request.name,
            email=str(request.email),
            phone=request.phone,
            company_name=request.company,
            industry=request.industry,
            service_type=request.service_type,
            needs_description=request.message,
            subject=request.subject,
        )

    def form_fields(self) -> Dict[str, Any]:
        """The structured submission as stored in raw_data / recovery records."""
        return self.model_dump(mode="json", include=set(Submission.model_fields))


class ValidationDetails(BaseModel):
    email_valid: bool
    phone_valid: bool
    company_filled: bool
    needs_description_length: int
    needs_adequate: bool
    contact_name_filled: bool


class ValidatedLead(Submission):
    validation_score: int = Field(ge=0, le=100)
    is_likely_spam: bool
    validation_details: ValidationDetails

    @property
    def passes_fast_gate(self) -> bool:
        """True when the lead is worth a classification call."""
        return self.validation_score > 30 and not self.is_likely_spam
