"""Configuration and per-deploy state.

There is no module-level state here: platform limits live in a
`PlatformLimitsProvider` owned by each `Ship` instance and reach the pipeline
through an explicit `DeployContext`.
"""
# ruff: noqa: F401
from .config import DEFAULT_API_URL, PlatformLimits, ShipConfig
from .context import DeployContext, PlatformLimitsProvider, SPAChecker
