"""Pydantic models for batch execution envelopes and output records."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class HashOutputRecord(StrictModel):
    """Successful hash operation output."""

    hash: str


class MatchOutputRecord(StrictModel):
    """Successful verify operation output."""

    match: bool


class ErrorOutputRecord(StrictModel):
    """Item-scoped failure output emitted when failures are tolerated."""

    error: str


OutputRecord = HashOutputRecord | MatchOutputRecord | ErrorOutputRecord


class BatchExecuteRequest(StrictModel):
    """HTTP request model carrying host input records and the tolerance flag."""

    items: list[Any]
    continue_on_fail: bool = Field(default=False, alias="continueOnFail")


class BatchExecuteResponse(StrictModel):
    """HTTP response model with one output record per processed input record."""

    items: list[OutputRecord]


class BatchAbortDetail(StrictModel):
    """Error detail returned when a batch is aborted on its first failing item."""

    message: str
    item_index: int = Field(alias="itemIndex")
