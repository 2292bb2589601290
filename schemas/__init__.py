from .submission import (
    SubmissionRequest,
    Submission,
    ValidationDetails,
    ValidatedLead,
)
from .scoring import (
    LeadClassification,
    LeadScore,
    JobAdDraft,
)
from .response import PipelineResponse

__all__ = [
    "SubmissionRequest", "Submission", "ValidationDetails", "ValidatedLead",
    "LeadClassification", "LeadScore", "JobAdDraft",
    "PipelineResponse",
]
