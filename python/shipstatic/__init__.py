# ruff: noqa: F401
from .errors import (
    BusinessRuleError,
    ConfigurationError,
    FileIOError,
    PlatformError,
    SecurityViolationError,
    ShipError,
    WrongEnvironmentError,
)
from .ship import Ship
from .state import PlatformLimits, ShipConfig
from .types import CandidateFile, DeployOptions, FileRecord, FileStatus, UploadHandle, ValidationOutcome

try:
    from ._version import __version__  # type: ignore
except ImportError:
    __version__ = "0.0.0.dev0"
