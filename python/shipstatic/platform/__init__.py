# ruff: noqa: F401
from .client import ApiClient
