import logging
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pharmacare.core.errors import Conflict, NotFound
from pharmacare.db.models.catalog import BrandModel, CategoryModel, ManufacturerModel, MedicineModel
from pharmacare.schemas.catalog import MedicineIn

logger = logging.getLogger(__name__)


async def list_medicines(
    db: AsyncSession,
    brand_id: Optional[int] = None,
    category_id: Optional[int] = None,
    name: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> Sequence[MedicineModel]:
    """
    List medicines, optionally filtered by brand, category or a name fragment.

    Args:
        db: Database session
        brand_id: Only medicines of this brand
        category_id: Only medicines in this category
        name: Case-insensitive substring of the medicine name
        skip: Number of records to skip
        limit: Maximum number of records to return
    """
    query = select(MedicineModel)
    if brand_id is not None:
        query = query.where(MedicineModel.brand_id == brand_id)
    if category_id is not None:
        query = query.where(MedicineModel.category_id == category_id)
    if name:
        query = query.where(MedicineModel.name.ilike(f"%{name.strip()}%"))
    query = query.order_by(MedicineModel.id).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


async def get_medicine(db: AsyncSession, medicine_id: int) -> MedicineModel:
    medicine = await db.get(MedicineModel, medicine_id)
    if not medicine:
        raise NotFound("Medicine not found", error_code="MEDICINE_NOT_FOUND")
    return medicine


async def list_categories(db: AsyncSession) -> Sequence[CategoryModel]:
    result = await db.execute(select(CategoryModel).order_by(CategoryModel.id))
    return result.scalars().all()


async def list_brands(db: AsyncSession) -> Sequence[BrandModel]:
    result = await db.execute(select(BrandModel).order_by(BrandModel.id))
    return result.scalars().all()


async def list_manufacturers(db: AsyncSession) -> Sequence[ManufacturerModel]:
    result = await db.execute(select(ManufacturerModel).order_by(ManufacturerModel.id))
    return result.scalars().all()


async def bulk_insert_medicines(db: AsyncSession, medicines: List[MedicineIn]) -> int:
    """Development helper: insert many medicines in one transaction."""
    db.add_all([MedicineModel(**m.model_dump()) for m in medicines])
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.error("Bulk medicine insert violated a constraint", exc_info=True)
        raise Conflict("One or more medicines reference unknown or duplicate data")
    logger.info(f"Inserted {len(medicines)} medicines")
    return len(medicines)
