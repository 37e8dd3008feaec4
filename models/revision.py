from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Revision(BaseModel):
    """
    One saved version of an article as returned by prop=revisions
    with formatversion=2, e.g.
        {"revid": 1234, "parentid": 1233, "minor": false, "user": "Alice",
         "userid": 42, "timestamp": "2025-08-11T02:56:35Z", "size": 2048,
         "comment": "copyedit"}
    user and comment are absent when suppressed, see
    https://www.mediawiki.org/wiki/Manual:RevisionDelete
    size_delta is not part of the API response, it is filled in by RevisionWindow.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(alias="revid", ge=0)
    parent_id: int = Field(default=0, alias="parentid", ge=0)
    timestamp: datetime
    user: str = ""
    user_id: int = Field(default=0, alias="userid")
    comment: str = ""
    size: int = 0
    minor: bool = False
    user_hidden: bool = Field(default=False, alias="userhidden")
    comment_hidden: bool = Field(default=False, alias="commenthidden")
    size_delta: int | None = None

    @property
    def is_page_creation(self):
        if self.parent_id == 0:
            return True
        return False

    @property
    def is_anonymous(self):
        if self.user_id == 0 and not self.user_hidden:
            return True
        return False
