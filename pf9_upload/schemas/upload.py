from pathlib import Path

from pydantic import BaseModel, ConfigDict


class LocalFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: Path
    size: int

    @property
    def name(self) -> str:
        return self.path.name


class UploadResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    object_key: str
    status_code: int
    size: int
    bucket: str | None = None
    customer_id: str | None = None
