from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FileStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    EXCLUDED = "excluded"
    VALIDATION_FAILED = "validation_failed"
    PROCESSING_ERROR = "processing_error"


TERMINAL_STATUSES = frozenset({
    FileStatus.READY,
    FileStatus.EXCLUDED,
    FileStatus.VALIDATION_FAILED,
    FileStatus.PROCESSING_ERROR,
})


class CandidateFile(BaseModel):
    """A file as shown to a user before the deploy is committed.

    Candidates are created PENDING and move to exactly one terminal status.
    A candidate that already failed while being read arrives as PROCESSING_ERROR.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    size: int
    mime_type: str | None = Field(None, alias="type")
    status: FileStatus = FileStatus.PENDING
    status_message: str | None = None

    def transition(self, status: FileStatus, message: str | None = None) -> "CandidateFile":
        """Return a copy of this candidate in a terminal status."""
        if self.status != FileStatus.PENDING:
            raise ValueError(f"Candidate {self.name!r} is already {self.status.value}")
        if status not in TERMINAL_STATUSES:
            raise ValueError(f"{status.value} is not a terminal status")
        return self.model_copy(update={"status": status, "status_message": message})


class Violation(BaseModel):
    """A blocking rule violation attributed to one file."""

    model_config = ConfigDict(frozen=True)

    file: str
    message: str
    rule: str | None = None

    def __str__(self) -> str:
        return f"{self.file}: {self.message}"


class Advisory(BaseModel):
    """A non-blocking notice, e.g. an empty file left out of the deploy."""

    model_config = ConfigDict(frozen=True)

    file: str
    message: str


class ValidationSummary(BaseModel):
    """Human-facing summary of a failed validation."""

    error: str
    """Short error category, e.g. "File Too Large"."""
    details: str
    errors: list[str]
    is_client_error: bool = True


class ValidationOutcome(BaseModel):
    files: list[CandidateFile]
    accepted_files: list[CandidateFile]
    violations: list[Violation] = []
    advisories: list[Advisory] = []
    can_proceed: bool
    error: ValidationSummary | None = None

    @model_validator(mode="after")
    def check_atomicity(self) -> "ValidationOutcome":
        if self.can_proceed and self.violations:
            raise ValueError("An outcome with violations cannot proceed")
        if not self.can_proceed and self.accepted_files:
            raise ValueError("A rejected outcome cannot accept files")
        return self
