"""Response returned to the caller of process_submission."""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class PipelineResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    classification: Optional[str] = None
    lead_score: Optional[int] = None
    job_ad_title: Optional[str] = None
    reason: Optional[str] = None
    errors: Optional[str] = None
    processing_time: int = Field(alias="processingTime")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
