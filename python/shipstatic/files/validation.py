"""Business-rule validation of a deploy's file set against platform limits.

One rule evaluator, two policies:

- fail-fast (`FailFastValidator`, `validate_fail_fast`): used while scanning
  real input. The first violation raises and aborts the whole operation.
- atomic batch (`validate_files`): used for pre-flight display. Every
  violation is collected, and if there is any, no file is accepted.

Zero-byte files are never violations. The fail-fast policy skips them, the
atomic policy marks them EXCLUDED with an advisory.

The cumulative size rule is applied in input order. The violation goes to the
file whose addition first pushes the running total over the limit, which is
not necessarily the largest file.
"""
import re
from enum import Enum
from typing import NamedTuple

import structlog

from ..errors import BusinessRuleError
from ..state import PlatformLimits
from ..types import Advisory, CandidateFile, FileStatus, ValidationOutcome, ValidationSummary, Violation
from ..utils import format_file_size, pluralize
from .mime import DEFAULT_MIME_TYPE, extensions_for, get_mime_type, is_known_mime_type
from .security import check_file_name

logger = structlog.get_logger("shipstatic.files.validation")


class Rule(str, Enum):
    NO_FILES = "no_files"
    FILE_COUNT = "file_count"
    PROCESSING = "processing"
    NAME = "name"
    EMPTY = "empty"
    FILE_SIZE = "file_size"
    TOTAL_SIZE = "total_size"
    MIME_REQUIRED = "mime_required"
    MIME_NOT_ALLOWED = "mime_not_allowed"
    MIME_INVALID = "mime_invalid"
    EXTENSION_MISMATCH = "extension_mismatch"


class Verdict(NamedTuple):
    status: FileStatus
    message: str
    rule: Rule | None = None


READY_MESSAGE = "Ready for upload"
EMPTY_MESSAGE = "File is empty (0 bytes)"
REJECTED_WITH_BATCH_MESSAGE = "Not uploaded: another file in this deploy failed validation"

_ERROR_TYPES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"File name cannot|Invalid file name|File name contains|File name uses|traversal", re.I), "Invalid File Name"),
    (re.compile(r"File size must be positive", re.I), "Invalid File Size"),
    (re.compile(r"MIME type is required", re.I), "Missing MIME Type"),
    (re.compile(r"Invalid MIME type", re.I), "Invalid MIME Type"),
    (re.compile(r"not allowed", re.I), "Invalid File Type"),
    (re.compile(r"extension does not match", re.I), "Extension Mismatch"),
    (re.compile(r"Number of files", re.I), "File Count Exceeded"),
    (re.compile(r"Total size", re.I), "Total Size Exceeded"),
    (re.compile(r"exceeds limit", re.I), "File Too Large"),
]


def error_type_for(status: FileStatus | None, message: str | None) -> str:
    if status == FileStatus.PROCESSING_ERROR:
        return "Processing Error"
    if not message:
        return "Validation Failed"
    for pattern, error_type in _ERROR_TYPES:
        if pattern.search(message):
            return error_type
    return "Validation Failed"


def extension_matches_mime(name: str, mime_type: str) -> bool:
    """Whether a file's extension is one registered for its MIME type.

    Dot files (.htaccess) and extensionless names (LICENSE) always match, as
    do MIME types with no registered extensions. So does the generic
    octet-stream type and whatever type the extension table itself gives the
    name: an unlisted extension (".toml") is never rejected for the type it
    was assigned. Only the last extension counts: "archive.tar.gz" is checked
    as "gz".
    """
    if mime_type == DEFAULT_MIME_TYPE or get_mime_type(name) == mime_type:
        return True
    basename = name.rsplit("/", 1)[-1]
    if basename.startswith("."):
        return True
    parts = basename.lower().split(".")
    if len(parts) < 2 or not parts[-1]:
        return True
    allowed = extensions_for(mime_type)
    return allowed is None or parts[-1] in allowed


class FileSetRules:
    """Incremental rule evaluator for one batch.

    Call `check_count` once, then `check` for each candidate in input order.
    It is stateful only through the running total of accepted bytes.
    """

    def __init__(self, limits: PlatformLimits) -> None:
        self.limits = limits
        self.total_size = 0

    def check_count(self, candidates: list[CandidateFile]) -> Violation | None:
        countable = [c for c in candidates if c.size != 0]
        if len(countable) <= self.limits.max_files_count:
            return None
        return Violation(
            file=countable[self.limits.max_files_count].name,
            message=f"Number of files ({len(countable)}) exceeds the limit of {self.limits.max_files_count}.",
            rule=Rule.FILE_COUNT.value,
        )

    def check(self, candidate: CandidateFile) -> Verdict:
        limits = self.limits
        failed = FileStatus.VALIDATION_FAILED

        if candidate.status == FileStatus.PROCESSING_ERROR:
            return Verdict(
                FileStatus.PROCESSING_ERROR,
                candidate.status_message or "A file failed during processing.",
                Rule.PROCESSING,
            )

        name_problem = check_file_name(candidate.name)
        if name_problem is not None:
            return Verdict(failed, name_problem, Rule.NAME)

        if candidate.size == 0:
            return Verdict(FileStatus.EXCLUDED, EMPTY_MESSAGE, Rule.EMPTY)
        if candidate.size < 0:
            return Verdict(failed, "File size must be positive", Rule.EMPTY)

        if candidate.size > limits.max_file_size:
            return Verdict(
                failed,
                f"File size ({format_file_size(candidate.size)}) exceeds limit of {format_file_size(limits.max_file_size)}",
                Rule.FILE_SIZE,
            )

        self.total_size += candidate.size
        if self.total_size > limits.max_total_size:
            return Verdict(
                failed,
                f"Total size would exceed limit of {format_file_size(limits.max_total_size)}",
                Rule.TOTAL_SIZE,
            )

        mime_type = (candidate.mime_type or "").strip()
        if not mime_type:
            return Verdict(failed, "File MIME type is required", Rule.MIME_REQUIRED)
        if not any(mime_type.startswith(category) for category in limits.allowed_mime_types):
            return Verdict(failed, f'File type "{mime_type}" is not allowed', Rule.MIME_NOT_ALLOWED)
        if not is_known_mime_type(mime_type):
            return Verdict(failed, f'Invalid MIME type "{mime_type}"', Rule.MIME_INVALID)
        if not extension_matches_mime(candidate.name, mime_type):
            return Verdict(failed, "File extension does not match MIME type", Rule.EXTENSION_MISMATCH)

        return Verdict(FileStatus.READY, READY_MESSAGE)


def _raise(violation: Violation) -> None:
    raise BusinessRuleError(str(violation), path=violation.file or None, rule=violation.rule)


class FailFastValidator:
    """Admits candidates one at a time and raises on the first violation.

    Built with the whole discovered batch so the count rule can run before
    any file is read.
    """

    def __init__(self, limits: PlatformLimits, candidates: list[CandidateFile]) -> None:
        self.rules = FileSetRules(limits)
        count_violation = self.rules.check_count(candidates)
        if count_violation is not None:
            _raise(count_violation)

    def admit(self, candidate: CandidateFile) -> bool:
        """True if the file goes into the deploy, False if it is skipped as empty."""
        verdict = self.rules.check(candidate)
        if verdict.status == FileStatus.EXCLUDED:
            logger.warning("Skipping empty file.", event_name="empty_file_skipped", path=candidate.name)
            return False
        if verdict.status != FileStatus.READY:
            _raise(Violation(file=candidate.name, message=verdict.message, rule=verdict.rule.value))
        return True


def validate_fail_fast(candidates: list[CandidateFile], limits: PlatformLimits) -> list[CandidateFile]:
    """Return the non-empty candidates, or raise BusinessRuleError on the first violation."""
    validator = FailFastValidator(limits, candidates)
    return [c for c in candidates if validator.admit(c)]


def _pending_copy(candidate: CandidateFile) -> CandidateFile:
    """A new PENDING candidate for the same file.

    Statuses from an earlier pass are not carried over, except a processing
    error, which is a fact about the file rather than a verdict on it.
    """
    if candidate.status in (FileStatus.PENDING, FileStatus.PROCESSING_ERROR):
        return candidate
    return CandidateFile(name=candidate.name, size=candidate.size, mime_type=candidate.mime_type)


def validate_files(candidates: list[CandidateFile], limits: PlatformLimits) -> ValidationOutcome:
    """Validate a whole batch atomically.

    Every call is a fresh pass: candidates that already carry a verdict (e.g.
    the `files` of an earlier outcome) are evaluated as new PENDING copies.
    The candidates passed in are never modified.

    If any file breaks a rule, every file that is not an empty-file exclusion
    is marked VALIDATION_FAILED (files that already failed processing keep
    that status) and nothing is accepted. Empty files alone never block.
    """
    if not candidates:
        message = "At least one file must be provided"
        return ValidationOutcome(
            files=[],
            accepted_files=[],
            violations=[Violation(file="", message=message, rule=Rule.NO_FILES.value)],
            can_proceed=False,
            error=ValidationSummary(error="No Files Provided", details=message, errors=[message]),
        )

    rules = FileSetRules(limits)
    violations: list[Violation] = []
    advisories: list[Advisory] = []

    count_violation = rules.check_count(candidates)
    if count_violation is not None:
        violations.append(count_violation)

    evaluated: list[tuple[CandidateFile, Verdict]] = []
    for candidate in map(_pending_copy, candidates):
        verdict = rules.check(candidate)
        evaluated.append((candidate, verdict))
        if verdict.status == FileStatus.EXCLUDED:
            advisories.append(Advisory(file=candidate.name, message=verdict.message))
        elif verdict.status != FileStatus.READY:
            violations.append(Violation(file=candidate.name, message=verdict.message, rule=verdict.rule.value))

    if not violations:
        files = [c.transition(v.status, v.message) for c, v in evaluated]
        return ValidationOutcome(
            files=files,
            accepted_files=[f for f in files if f.status == FileStatus.READY],
            advisories=advisories,
            can_proceed=True,
        )

    files: list[CandidateFile] = []
    for candidate, verdict in evaluated:
        if verdict.status == FileStatus.PROCESSING_ERROR:
            files.append(candidate.model_copy(update={"status_message": verdict.message}))
        elif verdict.status == FileStatus.EXCLUDED:
            files.append(candidate.transition(FileStatus.EXCLUDED, verdict.message))
        elif verdict.status == FileStatus.READY:
            files.append(candidate.transition(FileStatus.VALIDATION_FAILED, REJECTED_WITH_BATCH_MESSAGE))
        else:
            files.append(candidate.transition(FileStatus.VALIDATION_FAILED, verdict.message))

    first = next((v for v in violations if v.rule != Rule.FILE_COUNT.value), violations[0])
    first_status = FileStatus.PROCESSING_ERROR if first.rule == Rule.PROCESSING.value else FileStatus.VALIDATION_FAILED
    errors = [str(v) for v in violations]
    logger.info(
        "File set rejected.",
        violations=len(violations),
        files=pluralize(len(candidates), "file", "files"),
    )
    return ValidationOutcome(
        files=files,
        accepted_files=[],
        violations=violations,
        advisories=advisories,
        can_proceed=False,
        error=ValidationSummary(
            error=error_type_for(first_status, first.message),
            details=errors[0] if len(errors) == 1 else f"{pluralize(len(errors), 'file', 'files')} failed validation",
            errors=errors,
        ),
    )


def get_valid_files(files: list[CandidateFile]) -> list[CandidateFile]:
    return [f for f in files if f.status == FileStatus.READY]


def all_valid_files_ready(files: list[CandidateFile]) -> bool:
    return len(get_valid_files(files)) > 0
