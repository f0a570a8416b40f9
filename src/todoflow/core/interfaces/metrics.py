"""Metrics collaborator protocol."""

from typing import Protocol

from todoflow.core.domain.models import InteractionRecord


class InteractionLogProtocol(Protocol):
    """Accepts interaction records; nothing is read back by the pipeline."""

    async def track(self, record: InteractionRecord) -> None:
        ...
