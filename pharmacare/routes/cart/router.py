from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from pharmacare.core.middleware import get_db, require_user
from pharmacare.core.responses import ApiResponse
from pharmacare.db.crud.cart import add_to_cart, get_cart_items, remove_from_cart, update_cart_item
from pharmacare.schemas.cart import CartItemIn, CartItemOut, CartQuantityIn
from pharmacare.schemas.shared import Identity

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=ApiResponse[List[CartItemOut]])
async def get_cart(
    identity: Identity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    items = await get_cart_items(db, identity.user_id)
    return ApiResponse.ok([CartItemOut.model_validate(i) for i in items], message="Data fetched.")


@router.post("/", response_model=ApiResponse[CartItemOut], status_code=status.HTTP_201_CREATED)
async def add_item(
    item: CartItemIn,
    identity: Identity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    row = await add_to_cart(db, identity.user_id, item.medicine_id, item.quantity)
    return ApiResponse.ok(CartItemOut.model_validate(row), message="Item added to cart!", status_code=status.HTTP_201_CREATED)


@router.put("/{medicine_id}", response_model=ApiResponse[CartItemOut])
async def update_item(
    body: CartQuantityIn,
    medicine_id: int = Path(..., gt=0),
    identity: Identity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    row = await update_cart_item(db, identity.user_id, medicine_id, body.quantity)
    return ApiResponse.ok(CartItemOut.model_validate(row), message="Cart updated!")


@router.delete("/{medicine_id}", response_model=ApiResponse[None])
async def remove_item(
    medicine_id: int = Path(..., gt=0),
    identity: Identity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    await remove_from_cart(db, identity.user_id, medicine_id)
    return ApiResponse.ok(message="Cart item deleted!")
