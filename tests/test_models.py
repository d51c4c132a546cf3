from datetime import datetime, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from fleet_registry.models.vehicle import Vehicle, VehicleStatus


def _vehicle(plate: str, **overrides) -> Vehicle:
    now = datetime(2026, 2, 21, 10, 0, tzinfo=timezone.utc)
    fields = {
        "plate": plate, "brand": "Toyota", "model": "Corolla", "year": 2022,
        "color": "Silver", "created_at": now, "updated_at": now,
    }
    fields.update(overrides)
    return Vehicle(**fields)


@pytest.mark.asyncio
async def test_create_vehicle(db_session):
    vehicle = _vehicle("AB12345")
    db_session.add(vehicle)
    await db_session.commit()

    result = await db_session.get(Vehicle, vehicle.id)
    assert result is not None
    assert result.plate == "AB12345"
    assert result.status == VehicleStatus.ACTIVE


@pytest.mark.asyncio
async def test_plate_unique_constraint(db_session):
    db_session.add(_vehicle("AB12345"))
    await db_session.commit()

    db_session.add(_vehicle("AB12345", brand="Fiat"))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


@pytest.mark.asyncio
async def test_status_stored_as_value(db_session):
    db_session.add(_vehicle("CD67890", status=VehicleStatus.INACTIVE))
    await db_session.commit()

    result = await db_session.execute(select(Vehicle.status).where(Vehicle.plate == "CD67890"))
    assert result.scalar_one() == VehicleStatus.INACTIVE


@pytest.mark.asyncio
async def test_like_is_case_sensitive_on_sqlite(db_session):
    db_session.add(_vehicle("EF11223", brand="Volkswagen"))
    await db_session.commit()

    lower = await db_session.execute(select(Vehicle).where(Vehicle.brand.like("%volks%")))
    assert lower.scalars().all() == []

    exact = await db_session.execute(select(Vehicle).where(Vehicle.brand.like("%Volks%")))
    assert len(exact.scalars().all()) == 1
