import logging
from datetime import datetime, timezone

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_registry.database import storage_guard
from fleet_registry.models.vehicle import Vehicle
from fleet_registry.schemas.vehicle import VehicleCreate, VehicleUpdate
from fleet_registry.services.vehicle_queries import get_vehicle, get_vehicle_by_plate
from fleet_registry.utils.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def create_vehicle(session: AsyncSession, data: VehicleCreate) -> Vehicle:
    """Insert a validated vehicle.

    The plate pre-check gives the usual duplicate a clean error. Two requests
    racing on the same plate can both pass it; the unique constraint on
    ``vehicles.plate`` then rejects the second insert and ``storage_guard``
    turns that into the same ``ConflictError``.
    """
    if await get_vehicle_by_plate(session, data.plate) is not None:
        logger.warning("Create rejected: plate %s already registered", data.plate)
        raise ConflictError()

    now = _utcnow()
    vehicle = Vehicle(**data.model_dump(), created_at=now, updated_at=now)

    async with storage_guard(session, "create a vehicle"):
        session.add(vehicle)
        await session.commit()
        await session.refresh(vehicle)

    logger.info("Vehicle created: id=%s plate=%s", vehicle.id, vehicle.plate)
    return vehicle


async def update_vehicle(session: AsyncSession, data: VehicleUpdate) -> Vehicle:
    vehicle = await get_vehicle(session, data.id)
    if vehicle is None:
        logger.warning("Update rejected: vehicle %s not found", data.id)
        raise NotFoundError()

    changes = data.changes()
    new_plate = changes.get("plate")
    if new_plate is not None and new_plate != vehicle.plate:
        if await get_vehicle_by_plate(session, new_plate) is not None:
            logger.warning("Update rejected: plate %s already registered", new_plate)
            raise ConflictError()

    async with storage_guard(session, "update a vehicle"):
        for field, value in changes.items():
            setattr(vehicle, field, value)
        vehicle.updated_at = _utcnow()
        await session.commit()
        await session.refresh(vehicle)

    logger.info("Vehicle updated: id=%s fields=%s", vehicle.id, sorted(changes))
    return vehicle


async def delete_vehicle(session: AsyncSession, vehicle_id: int) -> bool:
    async with storage_guard(session, "delete a vehicle"):
        result = await session.execute(delete(Vehicle).where(Vehicle.id == vehicle_id))
        await session.commit()

    deleted = result.rowcount > 0
    if deleted:
        logger.info("Vehicle deleted: id=%s", vehicle_id)
    else:
        logger.info("Delete skipped: vehicle %s not found", vehicle_id)
    return deleted
