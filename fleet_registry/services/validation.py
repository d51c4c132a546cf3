"""Turn untrusted request payloads into validated vehicle requests.

Every function either returns a normalized pydantic model or raises
:class:`~fleet_registry.utils.exceptions.ValidationError` listing each
offending field. Nothing here touches the database.
"""
import logging
from datetime import date
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from fleet_registry.schemas.vehicle import VehicleCreate, VehicleListParams, VehicleUpdate
from fleet_registry.utils.exceptions import ValidationError, field_errors

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _validate(schema: type[SchemaT], data: Any, today: date | None = None) -> SchemaT:
    try:
        return schema.model_validate(data, context={"today": today or date.today()})
    except PydanticValidationError as exc:
        errors = field_errors(exc.errors())
        logger.debug("%s rejected: %s", schema.__name__, errors)
        raise ValidationError(errors) from exc


def validate_create(data: Any, today: date | None = None) -> VehicleCreate:
    return _validate(VehicleCreate, data, today)


def validate_update(data: Any, today: date | None = None) -> VehicleUpdate:
    return _validate(VehicleUpdate, data, today)


def validate_list(data: Any) -> VehicleListParams:
    return _validate(VehicleListParams, data)
