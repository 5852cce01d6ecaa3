"""Batch processor for per-item password hash and verify operations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence

from password_hash_batch.application.dto.batch_models import (
    ErrorOutputRecord,
    HashOutputRecord,
    MatchOutputRecord,
    OutputRecord,
)
from password_hash_batch.application.dto.item_result import ItemFailure, ItemResult, ItemSuccess
from password_hash_batch.application.ports.password_hasher_port import PasswordHasherPort
from password_hash_batch.domain.hash_operation import (
    DEFAULT_SALT_ROUNDS,
    HashOperation,
    ItemOperation,
    parse_item_operation,
)

logger = logging.getLogger(__name__)


class BatchAbortedError(Exception):
    """First item failure promoted to a batch-terminating error."""

    def __init__(self, *, item_index: int, message: str) -> None:
        super().__init__(f"item {item_index}: {message}")
        self.item_index = item_index
        self.message = message


class BatchHashService:
    """Hash or verify each input record, isolating failures per item."""

    def __init__(
        self,
        *,
        password_hasher: PasswordHasherPort,
        default_salt_rounds: int = DEFAULT_SALT_ROUNDS,
        max_concurrency: int = 1,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._password_hasher = password_hasher
        self._default_salt_rounds = default_salt_rounds
        self._max_concurrency = max_concurrency

    async def process(
        self,
        records: Sequence[Mapping[str, object]],
        *,
        continue_on_fail: bool,
    ) -> list[OutputRecord]:
        """Return one output record per input record, in input order.

        With ``continue_on_fail`` disabled, the first failing item (by index) raises
        BatchAbortedError and no output is returned.
        """

        logger.info(
            "batch_started items=%s continue_on_fail=%s max_concurrency=%s",
            len(records),
            continue_on_fail,
            self._max_concurrency,
        )
        outputs: list[OutputRecord] = []
        failed_count = 0
        for start in range(0, len(records), self._max_concurrency):
            window = records[start : start + self._max_concurrency]
            results = await asyncio.gather(
                *(
                    self._run_item(index=start + offset, record=record)
                    for offset, record in enumerate(window)
                )
            )
            # Results come back in index order, so the cutover is the lowest failing index.
            for result in results:
                if isinstance(result, ItemSuccess):
                    outputs.append(result.record)
                    continue

                if not continue_on_fail:
                    logger.error(
                        "batch_aborted item_index=%s error=%s",
                        result.index,
                        result.message,
                    )
                    raise BatchAbortedError(item_index=result.index, message=result.message)

                failed_count += 1
                outputs.append(ErrorOutputRecord(error=result.message))

        logger.info("batch_done items=%s failed=%s", len(outputs), failed_count)
        return outputs

    async def _run_item(self, *, index: int, record: Mapping[str, object]) -> ItemResult:
        try:
            operation = parse_item_operation(
                record,
                default_salt_rounds=self._default_salt_rounds,
            )
            output = await self._execute(operation)
        except Exception as error:  # noqa: BLE001
            message = str(error) or type(error).__name__
            logger.warning("item_failed item_index=%s error=%s", index, message)
            return ItemFailure(index=index, message=message)

        return ItemSuccess(index=index, record=output)

    async def _execute(self, operation: ItemOperation) -> OutputRecord:
        if isinstance(operation, HashOperation):
            digest = await asyncio.to_thread(
                self._password_hasher.hash_password,
                operation.password,
                cost=operation.cost,
            )
            return HashOutputRecord(hash=digest)

        match = await asyncio.to_thread(
            self._password_hasher.verify_password,
            password=operation.password,
            password_hash=operation.digest,
        )
        return MatchOutputRecord(match=match)
