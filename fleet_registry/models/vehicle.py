import enum

from sqlalchemy import Column, DateTime, Enum, Integer, String

from fleet_registry.database import Base

PLATE_MIN_LENGTH = 7
PLATE_MAX_LENGTH = 10
BRAND_MAX_LENGTH = 100
MODEL_MAX_LENGTH = 100
COLOR_MAX_LENGTH = 50
MIN_YEAR = 1900


class VehicleStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plate = Column(String(PLATE_MAX_LENGTH), nullable=False, unique=True)
    brand = Column(String(BRAND_MAX_LENGTH), nullable=False)
    model = Column(String(MODEL_MAX_LENGTH), nullable=False)
    year = Column(Integer, nullable=False)
    color = Column(String(COLOR_MAX_LENGTH), nullable=False)
    status = Column(
        Enum(
            VehicleStatus,
            name="vehicle_status",
            values_callable=lambda statuses: [s.value for s in statuses],
            validate_strings=True,
        ),
        nullable=False,
        default=VehicleStatus.ACTIVE,
    )
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<Vehicle id={self.id} plate={self.plate!r}>"
