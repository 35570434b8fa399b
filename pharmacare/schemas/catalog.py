from datetime import date
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CatalogModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CategoryOut(CatalogModel):
    category_id: int = Field(validation_alias="id")
    category_name: str = Field(validation_alias="name")
    description: Optional[str] = None


class BrandOut(CatalogModel):
    brand_id: int = Field(validation_alias="id")
    brand_name: str = Field(validation_alias="name")
    description: Optional[str] = None


class ManufacturerOut(CatalogModel):
    manufacturer_id: int = Field(validation_alias="id")
    manufacturer_name: str = Field(validation_alias="name")
    description: Optional[str] = None


class MedicineOut(CatalogModel):
    medicine_id: int = Field(validation_alias="id")
    medicine_name: str = Field(validation_alias="name")
    description: Optional[str] = None
    price: Decimal
    expiry: Optional[date] = Field(None, validation_alias="expiry_date")
    is_prescription_required: bool = Field(validation_alias="prescription_required")
    stock: int = Field(validation_alias="stock_quantity")
    category_id: Optional[int] = None
    brand_id: Optional[int] = None


class MedicineIn(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=200)]
    description: Optional[str] = None
    price: Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]
    expiry_date: Optional[date] = None
    prescription_required: bool = False
    stock_quantity: Annotated[int, Field(ge=0)] = 0
    category_id: Optional[int] = None
    brand_id: Optional[int] = None
    manufacturer_id: Optional[int] = None


class BulkMedicineIn(BaseModel):
    medicines: Annotated[List[MedicineIn], Field(min_length=1)]


class BulkInsertOut(BaseModel):
    count: int
