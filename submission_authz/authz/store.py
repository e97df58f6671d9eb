from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .types import ResourceRef, SubmissionsFilter


class AuthzStore(Protocol):
    """
    Lookups the authorization engine depends on.

    Implementations raise `StoreError` on any failure; "nothing found" is a
    normal result (None or an empty list), never an error.
    """

    def get_uid_from_session(self, secret: str) -> int | None: ...

    def get_user_roles(self, user_id: int) -> frozenset[str]: ...

    def search_submissions(self, filter: SubmissionsFilter) -> list[ResourceRef]: ...

    def get_submission_files(self, file_ids: Sequence[int]) -> list[ResourceRef]: ...
