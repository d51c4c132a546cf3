from datetime import date
from typing import Any

from fastapi import APIRouter, Body, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_registry.database import get_db
from fleet_registry.dependencies import get_today
from fleet_registry.models.vehicle import VehicleStatus
from fleet_registry.schemas.vehicle import DEFAULT_PAGE_SIZE, MAX_DB_INTEGER, VehicleResponse
from fleet_registry.services import vehicle_mutations, vehicle_queries
from fleet_registry.services.validation import validate_create, validate_list, validate_update
from fleet_registry.utils.exceptions import NotFoundError
from fleet_registry.utils.response import success_response

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.get("")
async def list_vehicles(
    brand: str | None = None,
    model: str | None = None,
    status: VehicleStatus | None = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    db: AsyncSession = Depends(get_db),
):
    params = validate_list({
        "brand": brand,
        "model": model,
        "status": status,
        "page": page,
        "page_size": page_size,
    })
    result = await vehicle_queries.list_vehicles(db, params)
    return success_response(data=result)


@router.get("/stats")
async def get_stats(db: AsyncSession = Depends(get_db)):
    stats = await vehicle_queries.get_stats(db)
    return success_response(data=stats)


@router.get("/brands")
async def list_brands(db: AsyncSession = Depends(get_db)):
    return success_response(data=await vehicle_queries.list_brands(db))


@router.get("/models")
async def list_models(brand: str | None = None, db: AsyncSession = Depends(get_db)):
    return success_response(data=await vehicle_queries.list_models(db, brand))


@router.get("/plate/{plate}")
async def get_vehicle_by_plate(plate: str, db: AsyncSession = Depends(get_db)):
    vehicle = await vehicle_queries.get_vehicle_by_plate(db, plate)
    if vehicle is None:
        raise NotFoundError()
    return success_response(data=VehicleResponse.model_validate(vehicle))


@router.get("/{vehicle_id}")
async def get_vehicle(vehicle_id: int = Path(gt=0, le=MAX_DB_INTEGER), db: AsyncSession = Depends(get_db)):
    vehicle = await vehicle_queries.get_vehicle(db, vehicle_id)
    if vehicle is None:
        raise NotFoundError()
    return success_response(data=VehicleResponse.model_validate(vehicle))


@router.post("", status_code=201)
async def create_vehicle(
    payload: dict[str, Any] = Body(...),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
):
    data = validate_create(payload, today=today)
    vehicle = await vehicle_mutations.create_vehicle(db, data)
    return success_response(data=VehicleResponse.model_validate(vehicle), message="Vehicle created")


@router.patch("/{vehicle_id}")
async def update_vehicle(
    vehicle_id: int,
    payload: dict[str, Any] = Body(...),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
):
    data = validate_update({**payload, "id": vehicle_id}, today=today)
    vehicle = await vehicle_mutations.update_vehicle(db, data)
    return success_response(data=VehicleResponse.model_validate(vehicle), message="Vehicle updated")


@router.delete("/{vehicle_id}")
async def delete_vehicle(vehicle_id: int = Path(gt=0, le=MAX_DB_INTEGER), db: AsyncSession = Depends(get_db)):
    deleted = await vehicle_mutations.delete_vehicle(db, vehicle_id)
    return success_response(data={"deleted": deleted})
