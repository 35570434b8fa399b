from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from pharmacare.core.middleware import get_db, require_user
from pharmacare.core.responses import ApiResponse
from pharmacare.db.crud.cart import add_to_wishlist, get_wishlist_items, remove_from_wishlist
from pharmacare.schemas.cart import WishlistItemIn, WishlistItemOut
from pharmacare.schemas.shared import Identity

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.get("/", response_model=ApiResponse[List[WishlistItemOut]])
async def get_wishlist(
    identity: Identity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    items = await get_wishlist_items(db, identity.user_id)
    return ApiResponse.ok([WishlistItemOut.model_validate(i) for i in items], message="Data fetched.")


@router.post("/", response_model=ApiResponse[WishlistItemOut], status_code=status.HTTP_201_CREATED)
async def add_item(
    item: WishlistItemIn,
    identity: Identity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    row = await add_to_wishlist(db, identity.user_id, item.medicine_id)
    return ApiResponse.ok(
        WishlistItemOut.model_validate(row), message="Item added to wishlist!", status_code=status.HTTP_201_CREATED
    )


@router.delete("/{medicine_id}", response_model=ApiResponse[None])
async def remove_item(
    medicine_id: int = Path(..., gt=0),
    identity: Identity = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    await remove_from_wishlist(db, identity.user_id, medicine_id)
    return ApiResponse.ok(message="Wishlist item deleted!")
