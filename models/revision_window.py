from pydantic import BaseModel, model_validator

from models.revision import Revision
from models.revision_query import RevisionQuery


class RevisionWindow(BaseModel):
    """The ordered slice of history produced by one fetch, newest first.

    A window that is too long, out of order, contains duplicate ids or
    reaches past the requested ending revision does not validate."""

    query: RevisionQuery
    revisions: list[Revision] = []

    @model_validator(mode="after")
    def check_window(self):
        limit = self.query.result_limit
        if len(self.revisions) > limit:
            raise ValueError(
                f"Window holds {len(self.revisions)} revisions, limit was {limit}"
            )
        for newer, older in zip(self.revisions, self.revisions[1:]):
            if newer.id <= older.id:
                raise ValueError(
                    f"Revisions not strictly descending: {newer.id} before {older.id}"
                )
        if self.query.has_upper_bound and self.revisions:
            bound = self.query.ending_revision_id
            if self.revisions[0].id > bound:
                raise ValueError(
                    f"Revision {self.revisions[0].id} is newer than ending revision {bound}"
                )
        self._fill_size_deltas()
        return self

    def _fill_size_deltas(self):
        for index, revision in enumerate(self.revisions):
            if index + 1 < len(self.revisions):
                revision.size_delta = revision.size - self.revisions[index + 1].size
            elif revision.is_page_creation:
                revision.size_delta = revision.size
            else:
                # parent lies outside the window
                revision.size_delta = None

    @property
    def ids(self) -> list[int]:
        return [revision.id for revision in self.revisions]

    @property
    def newest(self) -> Revision | None:
        return self.revisions[0] if self.revisions else None

    @property
    def oldest(self) -> Revision | None:
        return self.revisions[-1] if self.revisions else None

    @property
    def is_empty(self) -> bool:
        return not self.revisions

    def __len__(self):
        return len(self.revisions)
