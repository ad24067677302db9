# ruff: noqa: F401
from .deploy import Deployment, DeployBody, DeployOptions, MultipartForm
from .file import FileRecord, UploadHandle
from .source import ByteSource, BytesSource, HandleSource, byte_source_adapter
from .validation import (
    Advisory,
    CandidateFile,
    FileStatus,
    ValidationOutcome,
    ValidationSummary,
    Violation,
)
