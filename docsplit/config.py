from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Ensure environment variables from the repository root .env are available
# regardless of the working directory used to start the process.
ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


class Settings(BaseSettings):
  azure_openai_api_key: str | None = Field(default=None, alias="AZURE_OPENAI_API_KEY")
  azure_openai_endpoint: str = Field(default="", alias="AZURE_OPENAI_ENDPOINT")
  azure_openai_api_version: str = Field(default="2024-12-01-preview", alias="AZURE_OPENAI_API_VERSION")
  azure_openai_deployment_name: str | None = Field(default=None, alias="AZURE_OPENAI_DEPLOYMENT_NAME")
  azure_openai_vision_model: str | None = Field(default=None, alias="AZURE_OPENAI_VISION_MODEL")
  azure_openai_timeout_seconds: float = Field(default=60.0, alias="AZURE_OPENAI_TIMEOUT_SECONDS")
  azure_openai_max_retries: int = Field(default=2, alias="AZURE_OPENAI_MAX_RETRIES")

  classification_window_size: int = Field(default=5, ge=1, alias="CLASSIFICATION_WINDOW_SIZE")
  boundary_confidence_threshold: int = Field(default=80, ge=0, le=100, alias="BOUNDARY_CONFIDENCE_THRESHOLD")
  identity_split_types: str = Field(default="tax_certificate", alias="IDENTITY_SPLIT_TYPES")
  page_render_zoom: float = Field(default=2.0, gt=0, alias="PAGE_RENDER_ZOOM")

  def ensure_endpoint(self) -> str:
    endpoint = (self.azure_openai_endpoint or "").strip()
    if not endpoint:
        return ""
    return endpoint.rstrip("/") + "/"

  def vision_model(self) -> str | None:
    return self.azure_openai_vision_model or self.azure_openai_deployment_name

  def identity_split_labels(self) -> list[str] | None:
    """Return the configured labels, or ``None`` when every type is eligible."""
    raw = (self.identity_split_types or "").strip()
    if raw == "*":
        return None
    return [label.strip() for label in raw.split(",") if label.strip()]

  class Config:
    case_sensitive = False
    populate_by_name = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  return Settings()  # type: ignore[arg-type]
