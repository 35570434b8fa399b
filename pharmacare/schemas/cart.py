from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from pharmacare.schemas.catalog import MedicineOut


class CartItemIn(BaseModel):
    medicine_id: Annotated[int, Field(gt=0)]
    quantity: Annotated[int, Field(gt=0, le=100)]


class CartQuantityIn(BaseModel):
    quantity: Annotated[int, Field(gt=0, le=100)]


class CartItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    medicine_id: int
    quantity: int
    medicine: Optional[MedicineOut] = None


class WishlistItemIn(BaseModel):
    medicine_id: Annotated[int, Field(gt=0)]


class WishlistItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    medicine_id: int
    created_at: Optional[datetime] = None
    medicine: Optional[MedicineOut] = None
