from typing import Any

from pydantic import BaseModel, field_validator

from models.revision import Revision


class ApiError(BaseModel):
    code: str
    info: str = ""


class ApiPage(BaseModel):
    """
    Missing pages come back as {"ns": 0, "title": "Xyz", "missing": true},
    invalid titles as {"title": "<", "invalid": true, "invalidreason": "..."}
    """

    title: str = ""
    pageid: int | None = None
    missing: bool = False
    invalid: bool = False
    invalidreason: str = ""
    revisions: list[Revision] = []


class ApiQuery(BaseModel):
    pages: list[ApiPage]

    # noinspection PyMethodParameters
    @field_validator("pages")
    def validate_single_page(cls, v):
        if len(v) != 1:
            raise ValueError(f"Expected exactly one page, got {len(v)}")
        return v


class ApiResponse(BaseModel):
    """Envelope of an action=query&prop=revisions response (formatversion=2)."""

    error: ApiError | None = None
    warnings: dict[str, Any] | None = None
    query: ApiQuery | None = None

    @property
    def page(self) -> ApiPage | None:
        if self.query is None:
            return None
        return self.query.pages[0]
