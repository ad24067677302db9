# ruff: noqa: F401
from .handles import process_handles
from .paths import discover_files, process_paths, walk_files
from .prepare import DeployInput, convert_deploy_input, detect_runtime, prepare_deploy
