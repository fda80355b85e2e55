"""Discipline reference data interface."""

from typing import Protocol

from agenda.core.disciplines import Discipline


class DisciplineCatalog(Protocol):
    """Interface for the discipline id -> name/color lookup."""

    def fetch_disciplines(self) -> list[Discipline]:
        ...
