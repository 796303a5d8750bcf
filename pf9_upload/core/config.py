from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_base: str = Field(default="https://uploads.platform9.com")
    whoami_path: str = Field(default="/whoami")
    presign_path: str = Field(default="/presign")
    presign_expires: int = Field(default=900, gt=0)
    max_file_bytes: int = Field(default=5 * 1024**3, gt=0)

    token_header: str = Field(default="x-upload-token")
    sse_algorithm: str = Field(default="AES256")
    error_body_max_lines: int = Field(default=200, gt=0)

    # None keeps the system temp dir and httpx default API timeouts; the
    # PUT then bounds only connecting, by connect_timeout.
    scratch_dir: Path | None = Field(default=None)
    timeout: float | None = Field(default=None)
    connect_timeout: float = Field(default=30.0, gt=0)

    def _join(self, path: str) -> str:
        return f"{self.api_base.rstrip('/')}/{path.lstrip('/')}"

    @property
    def whoami_url(self) -> str:
        return self._join(self.whoami_path)

    @property
    def presign_url(self) -> str:
        return self._join(self.presign_path)


@lru_cache
def get_settings() -> Settings:
    return Settings()
