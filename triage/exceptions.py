"""Exceptions raised by the triage pipeline stages."""
from typing import List


class LeadIntakeError(Exception):
    """Base class for pipeline faults that Failure Recovery absorbs."""


class EmptyCompletionError(LeadIntakeError):
    def __init__(self, stage: str):
        self.stage = stage
        super().__init__(f"{stage}: completion service returned no content")


class CompletionSchemaError(LeadIntakeError):
    """Completion output did not match the expected schema."""

    def __init__(self, stage: str, raw: str, violations: List[str]):
        self.stage = stage
        self.raw = raw
        self.violations = violations
        super().__init__(f"{stage}: invalid response structure: {'; '.join(violations)}")


class UnknownClassificationError(LeadIntakeError):
    def __init__(self, classification):
        self.classification = classification
        super().__init__(f"Unknown classification: {classification}")


class NotificationError(LeadIntakeError):
    def __init__(self, recipient: str, detail: str):
        self.recipient = recipient
        super().__init__(f"Failed to send email to {recipient}: {detail}")
