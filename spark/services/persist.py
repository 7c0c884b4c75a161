from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable

from spark.app.domain.errors import NotFoundError
from spark.app.domain.models import IdeaRecord
from spark.app.infra.db.base import IdeaRepository

logger = logging.getLogger(__name__)


class Persister:
    def __init__(self, repository: IdeaRepository) -> None:
        self._repo = repository

    def save_all(self, records: Iterable[IdeaRecord]) -> list[IdeaRecord]:
        """
        One insert per record, in order.
        A failure partway leaves the earlier rows committed.
        """
        stored: list[IdeaRecord] = []
        for record in records:
            stored.append(self._repo.insert_idea(record))
        return stored

    def refresh(
        self,
        idea_id: int,
        mini_ideas: list[str],
        title_summaries: list[str],
        refreshed_at: datetime | None = None,
    ) -> datetime:
        refreshed_at = refreshed_at or datetime.now(timezone.utc)
        if not self._repo.update_generated_ideas(idea_id, mini_ideas, title_summaries, refreshed_at):
            raise NotFoundError("Idea", idea_id)
        return refreshed_at
