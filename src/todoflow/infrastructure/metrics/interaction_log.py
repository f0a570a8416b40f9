"""
Interaction Logs

Metrics collaborators receiving one InteractionRecord per turn:
- InMemoryInteractionLog keeps records in a list (tests, throwaway sessions)
- JsonlInteractionLog appends one JSON line per record

`summarize_interactions` aggregates logged records for the CLI.
"""

import asyncio
import json
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import aiofiles
import structlog

from todoflow.core.domain.models import InteractionRecord

logger = structlog.get_logger()


class InMemoryInteractionLog:
    def __init__(self) -> None:
        self.records: list[InteractionRecord] = []

    async def track(self, record: InteractionRecord) -> None:
        self.records.append(record)


class JsonlInteractionLog:
    """Append-only JSON Lines interaction log."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()
        self.logger = logger.bind(component="jsonl_interaction_log")

    async def track(self, record: InteractionRecord) -> None:
        line = json.dumps(record.to_dict(), ensure_ascii=False, default=str)
        async with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(self.path, "a", encoding="utf-8") as f:
                await f.write(line + "\n")
        self.logger.debug("interaction.logged", path=str(self.path))


def load_interactions(path: str | Path) -> list[dict[str, Any]]:
    """Read a JSONL interaction log; malformed lines are skipped with a warning."""
    log_path = Path(path)
    if not log_path.exists():
        return []
    records = []
    with open(log_path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                logger.warning(
                    "interaction.log_line_invalid",
                    path=str(log_path),
                    line=line_number,
                    error=str(e),
                )
    return records


@dataclass(frozen=True)
class InteractionSummary:
    """Aggregate view over logged interactions."""

    count: int = 0
    success_rate: float = 0.0
    avg_response_time_ms: float = 0.0
    max_response_time_ms: int = 0
    todo_success_total: int = 0
    todo_fail_total: int = 0
    total_tokens: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "success_rate": round(self.success_rate, 4),
            "avg_response_time_ms": round(self.avg_response_time_ms, 1),
            "max_response_time_ms": self.max_response_time_ms,
            "todo_success_total": self.todo_success_total,
            "todo_fail_total": self.todo_fail_total,
            "total_tokens": self.total_tokens,
        }


def summarize_interactions(
    records: Iterable[dict[str, Any]], agent_type: str | None = None
) -> InteractionSummary:
    selected = [
        record
        for record in records
        if agent_type is None or record.get("agentType") == agent_type
    ]
    if not selected:
        return InteractionSummary()

    times = [int(record.get("responseTimeMs", 0)) for record in selected]
    successes = sum(1 for record in selected if record.get("success"))
    tokens = sum(
        int((record.get("tokenUsage") or {}).get("total_tokens", 0)) for record in selected
    )
    return InteractionSummary(
        count=len(selected),
        success_rate=successes / len(selected),
        avg_response_time_ms=sum(times) / len(times),
        max_response_time_ms=max(times),
        todo_success_total=sum(int(record.get("todoSuccessCount", 0)) for record in selected),
        todo_fail_total=sum(int(record.get("todoFailCount", 0)) for record in selected),
        total_tokens=tokens,
    )
