from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: Literal["dev", "staging", "prod"] = "dev"
    app_name: str = "Gitshelf API"
    api_prefix: str = ""
    debug: bool = False
    cors_allow_origins: str = "*"
    port: int = 3000
    log_level: str = "INFO"

    storage_provider: Literal["github", "local"] = "github"
    storage_namespace: str = "images"
    storage_local_dir: str = "./storage"
    storage_public_base_url: str = "http://localhost:3000/public"
    max_upload_bytes: int = Field(default=25 * 1024 * 1024, gt=0)

    github_token: str = ""
    github_owner: str = ""
    github_repo: str = ""
    github_branch: str = "main"
    github_api_url: str = "https://api.github.com"
    raw_content_base_url: str = "https://raw.githubusercontent.com"
    remote_timeout_seconds: float = Field(default=15.0, gt=0)

    transcode_extensions: str = "heic,heif,tif,tiff,bmp"
    transcode_format: Literal["png", "jpeg", "webp"] = "png"

    keepalive_url: str = ""
    keepalive_interval_seconds: int = Field(default=600, gt=0)

    @property
    def transcode_extension_set(self) -> set[str]:
        return {
            item.strip().lower().lstrip(".")
            for item in self.transcode_extensions.split(",")
            if item.strip()
        }

    @property
    def cors_origins(self) -> list[str]:
        return [item.strip() for item in self.cors_allow_origins.split(",") if item.strip()]

    def missing_required(self) -> list[str]:
        if self.storage_provider != "github":
            return []
        required = {
            "GITHUB_TOKEN": self.github_token,
            "GITHUB_OWNER": self.github_owner,
            "GITHUB_REPO": self.github_repo,
        }
        return [name for name, value in required.items() if not value]


@lru_cache
def get_settings() -> Settings:
    return Settings()
