from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

NOT_FOUND_MESSAGE = "Not Found"


class WhoAmIResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    allowed_prefix: str | None = None
    bucket: str | None = None
    customer_id: str | None = None
    message: str | None = None

    @field_validator("bucket", "customer_id", "message", mode="before")
    @classmethod
    def _only_strings(cls, value: Any) -> str | None:
        # Informational fields of any other type are ignored, not rejected.
        return value if isinstance(value, str) else None


class Identity(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed_prefix: str
    bucket: str | None = None
    customer_id: str | None = None
