from typing import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pharmacare.core.errors import Conflict, NotFound
from pharmacare.db.crud.catalog import get_medicine
from pharmacare.db.models.cart import CartItemModel, WishlistItemModel


async def _find(db: AsyncSession, model, user_id: int, medicine_id: int):
    result = await db.execute(
        select(model)
        .options(selectinload(model.medicine))
        .where(model.user_id == user_id, model.medicine_id == medicine_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _list(db: AsyncSession, model, user_id: int):
    result = await db.execute(
        select(model).options(selectinload(model.medicine)).where(model.user_id == user_id).order_by(model.id)
    )
    return result.scalars().all()


# ---- Cart ----

async def get_cart_items(db: AsyncSession, user_id: int) -> Sequence[CartItemModel]:
    return await _list(db, CartItemModel, user_id)


async def add_to_cart(db: AsyncSession, user_id: int, medicine_id: int, quantity: int) -> CartItemModel:
    await get_medicine(db, medicine_id)
    if await _find(db, CartItemModel, user_id, medicine_id):
        raise Conflict("Item already exists in cart, try to update it!", error_code="CART_ITEM_EXISTS")

    db.add(CartItemModel(user_id=user_id, medicine_id=medicine_id, quantity=quantity))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Item already exists in cart, try to update it!", error_code="CART_ITEM_EXISTS")
    return await _find(db, CartItemModel, user_id, medicine_id)


async def update_cart_item(db: AsyncSession, user_id: int, medicine_id: int, quantity: int) -> CartItemModel:
    item = await _find(db, CartItemModel, user_id, medicine_id)
    if not item:
        raise NotFound("Item not found in cart", error_code="CART_ITEM_NOT_FOUND")
    item.quantity = quantity
    await db.commit()
    return item


async def remove_from_cart(db: AsyncSession, user_id: int, medicine_id: int) -> None:
    item = await _find(db, CartItemModel, user_id, medicine_id)
    if not item:
        raise NotFound("Item not found in cart", error_code="CART_ITEM_NOT_FOUND")
    await db.delete(item)
    await db.commit()


# ---- Wishlist ----

async def get_wishlist_items(db: AsyncSession, user_id: int) -> Sequence[WishlistItemModel]:
    return await _list(db, WishlistItemModel, user_id)


async def add_to_wishlist(db: AsyncSession, user_id: int, medicine_id: int) -> WishlistItemModel:
    await get_medicine(db, medicine_id)
    if await _find(db, WishlistItemModel, user_id, medicine_id):
        raise Conflict("Item already exists in wishlist", error_code="WISHLIST_ITEM_EXISTS")

    db.add(WishlistItemModel(user_id=user_id, medicine_id=medicine_id))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Item already exists in wishlist", error_code="WISHLIST_ITEM_EXISTS")
    return await _find(db, WishlistItemModel, user_id, medicine_id)


async def remove_from_wishlist(db: AsyncSession, user_id: int, medicine_id: int) -> None:
    item = await _find(db, WishlistItemModel, user_id, medicine_id)
    if not item:
        raise NotFound("Item not found in wishlist", error_code="WISHLIST_ITEM_NOT_FOUND")
    await db.delete(item)
    await db.commit()
