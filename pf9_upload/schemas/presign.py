from pydantic import BaseModel, ConfigDict, Field


class PresignRequest(BaseModel):
    key: str = Field(..., min_length=1)
    expires: int = Field(..., gt=0)


class PresignResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str | None = Field(default=None, repr=False)
    error: str | None = None
