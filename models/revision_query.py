from pydantic import BaseModel, field_validator

import config
from models.article_ref import ArticleRef


class RevisionQuery(BaseModel):
    """
    The N most recent revisions of an article, ending at or before
    ending_revision_id. 0 means no upper bound, start from the latest revision.
    """

    article: ArticleRef
    result_limit: int
    ending_revision_id: int = 0

    # noinspection PyMethodParameters
    @field_validator("result_limit")
    def validate_result_limit(cls, v):
        if v < 1:
            raise ValueError(f"result_limit must be at least 1, got {v}")
        return v

    # noinspection PyMethodParameters
    @field_validator("ending_revision_id")
    def validate_ending_revision_id(cls, v):
        if v < 0:
            raise ValueError(f"ending_revision_id must not be negative, got {v}")
        return v

    @property
    def has_upper_bound(self) -> bool:
        return self.ending_revision_id > 0

    def to_params(self) -> dict[str, str | int]:
        params: dict[str, str | int] = {
            "action": "query",
            "format": "json",
            "formatversion": 2,
            "prop": "revisions",
            "redirects": 1,
            "titles": self.article.title,
            "rvprop": config.RVPROP,
            "rvlimit": self.result_limit,
            # older = newest first
            "rvdir": "older",
        }
        if self.has_upper_bound:
            params["rvstartid"] = self.ending_revision_id
        return params
