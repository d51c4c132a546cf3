import logging
import math

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_registry.database import storage_guard
from fleet_registry.models.vehicle import Vehicle, VehicleStatus
from fleet_registry.schemas.vehicle import (
    PaginatedVehicles,
    VehicleListParams,
    VehicleResponse,
    VehicleStats,
)

logger = logging.getLogger(__name__)


def _filter_conditions(params: VehicleListParams) -> list:
    conditions = []
    if params.brand:
        conditions.append(Vehicle.brand.contains(params.brand, autoescape=True))
    if params.model:
        conditions.append(Vehicle.model.contains(params.model, autoescape=True))
    if params.status:
        conditions.append(Vehicle.status == params.status)
    return conditions


async def list_vehicles(session: AsyncSession, params: VehicleListParams) -> PaginatedVehicles:
    """Return one page of vehicles matching the filters, newest first.

    The count and the page are built from the same conditions, so ``total``
    always describes the unpaginated result of ``data``'s query.
    """
    conditions = _filter_conditions(params)
    offset = (params.page - 1) * params.page_size

    async with storage_guard(session, "list vehicles"):
        total = await session.scalar(select(func.count()).select_from(Vehicle).where(*conditions))
        result = await session.execute(
            select(Vehicle)
            .where(*conditions)
            .order_by(Vehicle.created_at.desc(), Vehicle.id.desc())
            .offset(offset)
            .limit(params.page_size)
        )
        vehicles = result.scalars().all()

    total = total or 0
    logger.debug(
        "Listed vehicles page=%s page_size=%s total=%s returned=%s",
        params.page, params.page_size, total, len(vehicles),
    )
    return PaginatedVehicles(
        data=[VehicleResponse.model_validate(v) for v in vehicles],
        total=total,
        page=params.page,
        page_size=params.page_size,
        total_pages=math.ceil(total / params.page_size),
    )


async def get_vehicle(session: AsyncSession, vehicle_id: int) -> Vehicle | None:
    async with storage_guard(session, "look up a vehicle by id"):
        return await session.get(Vehicle, vehicle_id)


async def get_vehicle_by_plate(session: AsyncSession, plate: str) -> Vehicle | None:
    # plates are stored upper-cased
    async with storage_guard(session, "look up a vehicle by plate"):
        result = await session.execute(select(Vehicle).where(Vehicle.plate == plate.upper()).limit(1))
        return result.scalars().first()


async def list_brands(session: AsyncSession) -> list[str]:
    async with storage_guard(session, "list brands"):
        result = await session.execute(select(Vehicle.brand).distinct().order_by(Vehicle.brand))
        return list(result.scalars().all())


async def list_models(session: AsyncSession, brand: str | None = None) -> list[str]:
    query = select(Vehicle.model).distinct().order_by(Vehicle.model)
    if brand:
        query = query.where(Vehicle.brand == brand)
    async with storage_guard(session, "list models"):
        result = await session.execute(query)
        return list(result.scalars().all())


async def get_stats(session: AsyncSession) -> VehicleStats:
    """Vehicle counts for the dashboard."""
    async with storage_guard(session, "count vehicles"):
        result = await session.execute(
            select(Vehicle.status, func.count()).group_by(Vehicle.status)
        )
        counts = {status: count for status, count in result.all()}

    active = counts.get(VehicleStatus.ACTIVE, 0)
    inactive = counts.get(VehicleStatus.INACTIVE, 0)
    return VehicleStats(total=active + inactive, active=active, inactive=inactive)
