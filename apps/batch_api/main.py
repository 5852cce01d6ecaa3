"""batch-api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from pydantic import ValidationError

from password_hash_batch.application.dto.batch_models import (
    BatchAbortDetail,
    BatchExecuteRequest,
    BatchExecuteResponse,
)
from password_hash_batch.application.services.batch_hash_service import (
    BatchAbortedError,
    BatchHashService,
)
from password_hash_batch.config.settings import Settings, load_settings
from password_hash_batch.domain.hash_operation import describe_validation_error
from password_hash_batch.infrastructure.logging import configure_logging
from password_hash_batch.infrastructure.security.password_hasher import BcryptPasswordHasher

BATCH_API_HOST = "0.0.0.0"
BATCH_API_PORT = 8000
logger = logging.getLogger(__name__)


def build_batch_service(settings: Settings) -> BatchHashService:
    """Build batch hash service backed by the bcrypt adapter."""

    return BatchHashService(
        password_hasher=BcryptPasswordHasher(),
        default_salt_rounds=settings.default_salt_rounds,
        max_concurrency=settings.batch_max_concurrency,
    )


def create_app(*, batch_service: BatchHashService | None = None) -> FastAPI:
    """Create FastAPI app exposing the batch hash/verify execution route."""

    if batch_service is None:
        settings = load_settings()
        configure_logging(level=settings.log_level)
        batch_service = build_batch_service(settings)

    app = FastAPI()

    @app.post(
        "/password-hash/execute",
        response_model=BatchExecuteResponse,
    )
    async def execute_batch(request: Request) -> BatchExecuteResponse:
        raw_body = await request.body()
        try:
            payload = BatchExecuteRequest.model_validate_json(raw_body)
        except ValidationError as error:
            raise HTTPException(
                status_code=400,
                detail=describe_validation_error(error),
            ) from error

        logger.info(
            "batch_request_received items=%s continue_on_fail=%s",
            len(payload.items),
            payload.continue_on_fail,
        )
        try:
            outputs = await batch_service.process(
                payload.items,
                continue_on_fail=payload.continue_on_fail,
            )
        except BatchAbortedError as error:
            detail = BatchAbortDetail(message=error.message, item_index=error.item_index)
            raise HTTPException(
                status_code=422,
                detail=detail.model_dump(by_alias=True),
            ) from error

        return BatchExecuteResponse(items=outputs)

    return app


def run_asgi_server(*, host: str = BATCH_API_HOST, port: int = BATCH_API_PORT) -> None:
    """Run batch-api as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.batch_api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run batch-api runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
