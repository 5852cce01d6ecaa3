"""Per-item outcome variants produced by the batch processor."""

from __future__ import annotations

from dataclasses import dataclass

from password_hash_batch.application.dto.batch_models import OutputRecord


@dataclass(frozen=True)
class ItemSuccess:
    """Item completed and produced one hash or match record."""

    index: int
    record: OutputRecord


@dataclass(frozen=True)
class ItemFailure:
    """Item failed validation or capability invocation."""

    index: int
    message: str


ItemResult = ItemSuccess | ItemFailure
