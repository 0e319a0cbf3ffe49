"""
Failure classification for Courtside.

Every failure that reaches an API caller is a KnownError subclass rendered
as a FailureDetail body. Failures inside the matching engine are never
raised: the worst outcome for a single requirement is a Missing
classification.

Kinds:
- Input failures: the caller sent a record that cannot be used
- Resource failures: a referenced challenge does not exist
- Collaborator failures: a language model or the store is unavailable
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"

    # Resource failures
    NOT_FOUND = "not_found"

    # Collaborator failures
    SERVICE_UNAVAILABLE = "service_unavailable"
    EXTERNAL_API_ERROR = "external_api_error"
    UNPARSEABLE_RESPONSE = "unparseable_response"

    # Unknown
    UNKNOWN = "unknown"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail body."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class ChallengeNotFoundError(KnownError):
    """Raised when a challenge id is not in the store."""

    def __init__(self, challenge_id: str):
        self.challenge_id = challenge_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Challenge '{challenge_id}' not found",
            suggestion="List challenges to find a valid id.",
            status_code=404,
        )


class MalformedChallengeError(KnownError):
    """
    Raised when a challenge record is missing fields the analyzer needs.

    This is a contract violation at the boundary adapter, not a matching
    failure: a record without a requirement list is rejected outright.
    """

    def __init__(self, field_name: str, detail: str | None = None):
        self.field_name = field_name
        super().__init__(
            kind=FailureKind.MISSING_REQUIRED,
            message=f"Challenge record is missing '{field_name}'",
            detail=detail,
            suggestion="Re-scrape the challenge or fix the record before analyzing.",
            status_code=422,
        )


class SemanticAnalyzerError(KnownError):
    """
    Raised when a language-model analyzer cannot produce a usable result.

    Callers recover by falling back to the rule-based engine.
    """

    def __init__(
        self,
        analyzer: str,
        reason: str,
        kind: FailureKind = FailureKind.EXTERNAL_API_ERROR,
    ):
        self.analyzer = analyzer
        self.reason = reason
        super().__init__(
            kind=kind,
            message=f"The {analyzer} analyzer failed",
            detail=reason,
            suggestion="Use the rule_based strategy.",
            status_code=503,
        )
