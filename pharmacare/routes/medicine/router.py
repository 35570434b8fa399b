import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pharmacare.config.settings import Settings
from pharmacare.core.errors import Forbidden
from pharmacare.core.middleware import get_app_settings, get_db
from pharmacare.core.responses import ApiResponse
from pharmacare.db.crud.catalog import (
    bulk_insert_medicines,
    list_brands,
    list_categories,
    list_manufacturers,
    list_medicines,
)
from pharmacare.schemas.catalog import (
    BrandOut,
    BulkInsertOut,
    BulkMedicineIn,
    CategoryOut,
    ManufacturerOut,
    MedicineOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/medicines", tags=["medicines"])


@router.get("/", response_model=ApiResponse[List[MedicineOut]])
async def get_medicines(
    brand_id: Optional[int] = Query(None, gt=0),
    category_id: Optional[int] = Query(None, gt=0),
    name: Optional[str] = Query(None, min_length=1, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    medicines = await list_medicines(db, brand_id=brand_id, category_id=category_id, name=name, skip=skip, limit=limit)
    return ApiResponse.ok([MedicineOut.model_validate(m) for m in medicines])


@router.get("/categories", response_model=ApiResponse[List[CategoryOut]])
async def get_categories(db: AsyncSession = Depends(get_db)):
    return ApiResponse.ok([CategoryOut.model_validate(c) for c in await list_categories(db)])


@router.get("/brands", response_model=ApiResponse[List[BrandOut]])
async def get_brands(db: AsyncSession = Depends(get_db)):
    return ApiResponse.ok([BrandOut.model_validate(b) for b in await list_brands(db)])


@router.get("/manufacturers", response_model=ApiResponse[List[ManufacturerOut]])
async def get_manufacturers(db: AsyncSession = Depends(get_db)):
    return ApiResponse.ok([ManufacturerOut.model_validate(m) for m in await list_manufacturers(db)])


@router.post("/bulk", response_model=ApiResponse[BulkInsertOut], status_code=status.HTTP_201_CREATED)
async def bulk_insert(
    body: BulkMedicineIn,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Seed helper for local development, refused in production."""
    if settings.is_production:
        raise Forbidden("Bulk insert is disabled in production", error_code="DISABLED_IN_PRODUCTION")
    count = await bulk_insert_medicines(db, body.medicines)
    return ApiResponse.ok(BulkInsertOut(count=count), message="Medicines inserted", status_code=status.HTTP_201_CREATED)
