"""Pydantic models for per-request results."""

from pydantic import BaseModel, ConfigDict, Field


class Chapter(BaseModel):
    """A transformed spine document, produced per navigation call."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Position in the spine")
    href: str = Field(..., description="Archive path of the content document")
    content: str = Field(..., description="Transformed markup")
    total: int = Field(..., ge=1, description="Spine length")


class CoverResource(BaseModel):
    """Cover image encoded as a self-contained data URI."""

    model_config = ConfigDict(frozen=True)

    href: str
    media_type: str
    data_uri: str


class ZipCheckResult(BaseModel):
    """Outcome of the raw ZIP signature diagnostic."""

    model_config = ConfigDict(frozen=True)

    success: bool
    error: str | None = None
    size: int = 0
    signature: str | None = None
    end_of_central_directory: int | None = Field(
        default=None, description="Offset of the end of central directory record"
    )
