"""Validating parser for per-item hash/verify operation records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

MIN_SALT_ROUNDS = 1
MAX_SALT_ROUNDS = 20
DEFAULT_SALT_ROUNDS = 10

ModelT = TypeVar("ModelT", bound=BaseModel)


class Operation(StrEnum):
    """Supported per-item operations."""

    HASH = "hash"
    VERIFY = "verify"


@dataclass(frozen=True)
class HashOperation:
    """Hash one plaintext secret with an explicit cost factor."""

    password: str
    cost: int


@dataclass(frozen=True)
class VerifyOperation:
    """Compare one plaintext secret with a stored digest."""

    password: str
    digest: str


ItemOperation = HashOperation | VerifyOperation


@dataclass(frozen=True)
class ItemValidationError(ValueError):
    """Item parameter failure with a human-readable reason."""

    reason: str

    def __str__(self) -> str:
        return self.reason


class _HashParameters(BaseModel):
    model_config = ConfigDict(extra="ignore")

    password: StrictStr = ""
    salt_rounds: StrictInt = Field(
        default=DEFAULT_SALT_ROUNDS,
        ge=MIN_SALT_ROUNDS,
        le=MAX_SALT_ROUNDS,
        alias="saltRounds",
    )


class _VerifyParameters(BaseModel):
    model_config = ConfigDict(extra="ignore")

    password: StrictStr = ""
    digest: StrictStr = Field(default="", min_length=1, alias="hash", validate_default=True)


def parse_item_operation(
    record: Mapping[str, object],
    *,
    default_salt_rounds: int = DEFAULT_SALT_ROUNDS,
) -> ItemOperation:
    """Build one typed operation from a host record or raise ItemValidationError."""

    if not isinstance(record, Mapping):
        raise ItemValidationError(f"item must be an object, got {type(record).__name__}")

    raw_operation = record.get("operation", Operation.HASH.value)
    try:
        operation = Operation(raw_operation)
    except (TypeError, ValueError):
        raise ItemValidationError(f"Unsupported operation: {raw_operation!r}") from None

    if operation is Operation.HASH:
        payload = dict(record)
        payload.setdefault("saltRounds", default_salt_rounds)
        hash_parameters = _validate(_HashParameters, payload)
        return HashOperation(
            password=hash_parameters.password,
            cost=hash_parameters.salt_rounds,
        )

    verify_parameters = _validate(_VerifyParameters, dict(record))
    return VerifyOperation(
        password=verify_parameters.password,
        digest=verify_parameters.digest,
    )


def _validate(
    model: type[ModelT],
    record: Mapping[str, object],
) -> ModelT:
    try:
        return model.model_validate(record)
    except ValidationError as error:
        raise ItemValidationError(describe_validation_error(error)) from None


def describe_validation_error(error: ValidationError) -> str:
    """Flatten pydantic errors into `field: message` fragments without echoing input."""

    fragments = []
    for detail in error.errors(include_url=False, include_input=False):
        location = ".".join(str(part) for part in detail["loc"])
        message = detail["msg"]
        fragments.append(f"{location}: {message}" if location else message)
    return "; ".join(fragments)
