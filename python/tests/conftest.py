import os

import pytest
from dotenv import load_dotenv
from shipstatic.state import DeployContext, PlatformLimits, PlatformLimitsProvider
from shipstatic.types import DeployOptions

MB = 1024 * 1024


def pytest_configure(config):
    """Configure pytest with global settings."""
    load_dotenv()
    # Keep real credentials out of the tests.
    for var in ("SHIP_API_URL", "SHIP_API_KEY", "SHIP_DEPLOY_TOKEN"):
        os.environ.pop(var, None)


@pytest.fixture
def limits() -> PlatformLimits:
    return PlatformLimits(
        max_file_size=10 * MB,
        max_files_count=1000,
        max_total_size=100 * MB,
        allowed_mime_types=["text/", "image/", "application/", "font/", "audio/", "video/"],
    )


@pytest.fixture
def make_context(limits):
    """Build a DeployContext with the default limits and the given deploy options."""

    def _make(limits_override: PlatformLimits | None = None, spa_checker=None, **options) -> DeployContext:
        options.setdefault("spa_detect", False)
        return DeployContext(
            PlatformLimitsProvider(limits_override or limits),
            spa_checker=spa_checker,
            options=DeployOptions(**options),
        )

    return _make
