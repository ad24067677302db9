import os

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator

DEFAULT_API_URL = "https://api.shipstatic.com"
DEFAULT_TIMEOUT = 30.0


class PlatformLimits(BaseModel):
    """Upload limits published by the platform's /config endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_file_size: int = Field(alias="maxFileSize", gt=0)
    max_files_count: int = Field(alias="maxFilesCount", gt=0)
    max_total_size: int = Field(alias="maxTotalSize", gt=0)
    allowed_mime_types: list[str] = Field(alias="allowedMimeTypes")
    """MIME category prefixes, e.g. "text/" or "image/"."""


class ShipConfig(BaseModel):
    """Client configuration.

    Unset values are resolved from SHIP_API_URL, SHIP_API_KEY and
    SHIP_DEPLOY_TOKEN. An API key takes precedence over a deploy token.
    """

    api_url: str = ""
    api_key: SecretStr | None = None
    deploy_token: SecretStr | None = None
    timeout: float = DEFAULT_TIMEOUT

    @model_validator(mode="after")
    def resolve_from_env(self) -> "ShipConfig":
        if not self.api_url:
            self.api_url = os.getenv("SHIP_API_URL") or DEFAULT_API_URL
        self.api_url = self.api_url.rstrip("/")
        if self.api_key is None and os.getenv("SHIP_API_KEY"):
            self.api_key = SecretStr(os.environ["SHIP_API_KEY"])
        if self.deploy_token is None and os.getenv("SHIP_DEPLOY_TOKEN"):
            self.deploy_token = SecretStr(os.environ["SHIP_DEPLOY_TOKEN"])
        return self

    @property
    def auth_headers(self) -> dict[str, str]:
        """Format the authentication header for platform requests."""
        secret = self.api_key or self.deploy_token
        if secret is None:
            return {}
        return {"Authorization": f"Bearer {secret.get_secret_value()}"}
