from datetime import date, datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field, ValidationInfo, field_validator

from fleet_registry.models.vehicle import (
    BRAND_MAX_LENGTH,
    COLOR_MAX_LENGTH,
    MIN_YEAR,
    MODEL_MAX_LENGTH,
    PLATE_MAX_LENGTH,
    PLATE_MIN_LENGTH,
    VehicleStatus,
)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# ids and row offsets must fit a signed 64-bit column
MAX_DB_INTEGER = 2**63 - 1
MAX_PAGE = MAX_DB_INTEGER // MAX_PAGE_SIZE


def _uppercase(value: str) -> str:
    upper = value.upper()
    if len(upper) > PLATE_MAX_LENGTH:
        raise ValueError(f"Plate must have at most {PLATE_MAX_LENGTH} characters once upper-cased")
    return upper


def _check_year_ceiling(value: int, info: ValidationInfo) -> int:
    # "today" comes from the validation context so callers can pin the clock
    today = (info.context or {}).get("today") or date.today()
    ceiling = today.year + 1
    if value > ceiling:
        raise ValueError(f"Year cannot be later than {ceiling}")
    return value


# Length is checked before the plate is upper-cased.
Plate = Annotated[
    str,
    Field(min_length=PLATE_MIN_LENGTH, max_length=PLATE_MAX_LENGTH),
    AfterValidator(_uppercase),
]
Brand = Annotated[str, Field(min_length=1, max_length=BRAND_MAX_LENGTH)]
Model = Annotated[str, Field(min_length=1, max_length=MODEL_MAX_LENGTH)]
Color = Annotated[str, Field(min_length=1, max_length=COLOR_MAX_LENGTH)]
Year = Annotated[int, Field(strict=True, ge=MIN_YEAR), AfterValidator(_check_year_ceiling)]
VehicleId = Annotated[int, Field(strict=True, gt=0, le=MAX_DB_INTEGER)]


class VehicleCreate(BaseModel):
    plate: Plate
    brand: Brand
    model: Model
    year: Year
    color: Color
    status: VehicleStatus = VehicleStatus.ACTIVE


class VehicleUpdate(BaseModel):
    id: VehicleId
    plate: Plate | None = None
    brand: Brand | None = None
    model: Model | None = None
    year: Year | None = None
    color: Color | None = None
    status: VehicleStatus | None = None

    @field_validator("plate", "brand", "model", "year", "color", "status", mode="before")
    @classmethod
    def _reject_null(cls, value):
        # a field may be left out, but a supplied one must be a real value
        if value is None:
            raise ValueError("Field may be omitted but cannot be null")
        return value

    def changes(self) -> dict:
        """Fields the caller actually supplied, minus the id."""
        return self.model_dump(exclude_unset=True, exclude={"id"})


class VehicleListParams(BaseModel):
    brand: str | None = None
    model: str | None = None
    status: VehicleStatus | None = None
    page: int = Field(default=1, gt=0, le=MAX_PAGE)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, gt=0, le=MAX_PAGE_SIZE)


class VehicleResponse(BaseModel):
    id: int
    plate: str
    brand: str
    model: str
    year: int
    color: str
    status: VehicleStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PaginatedVehicles(BaseModel):
    data: list[VehicleResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class VehicleStats(BaseModel):
    total: int
    active: int
    inactive: int
