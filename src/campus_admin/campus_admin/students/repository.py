from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def list_all(self) -> Sequence[Student]:
        """All students, newest ``createdAt`` first."""
        raise NotImplementedError

    def get(self, doc_id: str) -> Optional[Student]:
        raise NotImplementedError

    def save(self, student: Student) -> None:
        raise NotImplementedError

    def link_uid(self, doc_id: str, uid: str) -> None:
        """Set ``uid`` on an existing document, leaving its other fields alone."""
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
