# ruff: noqa: F401
from .deploy_body import create_buffered_deploy_body, create_streaming_deploy_body
from .hashing import build_record, hash_bytes
from .junk import filter_junk, is_junk
from .mime import get_mime_type
from .paths import DeployPath, find_common_ancestor, normalize_slashes, normalize_web_path, optimize_deploy_paths
from .security import check_file_name, validate_deploy_file, validate_deploy_path
from .spa import DEPLOYMENT_CONFIG_FILENAME, SPAConfigurator, SPAState, create_spa_config, detect_and_configure_spa
from .validation import FailFastValidator, get_valid_files, validate_fail_fast, validate_files
