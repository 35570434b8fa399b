# pharmacare/db/crud/user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from typing import Optional

from pharmacare.db.models.user import UserModel


async def get_user(db: AsyncSession, user_id: int) -> Optional[UserModel]:
    """
    Get a user by ID.

    Args:
        db: Database session
        user_id: User ID

    Returns:
        UserModel or None if not found
    """
    return await db.get(UserModel, user_id)


async def get_user_by_phone(db: AsyncSession, phone: str) -> Optional[UserModel]:
    """
    Get a user by their (unique) phone number.

    Args:
        db: Database session
        phone: 10 digit phone number

    Returns:
        UserModel or None if not found
    """
    result = await db.execute(select(UserModel).where(UserModel.phone == phone))
    return result.scalar_one_or_none()


async def find_user_by_phone_or_email(db: AsyncSession, phone: str, email: Optional[str]) -> Optional[UserModel]:
    """Return any user already holding this phone or email."""
    conditions = [UserModel.phone == phone]
    if email:
        conditions.append(UserModel.email == email)
    result = await db.execute(select(UserModel).where(or_(*conditions)).limit(1))
    return result.scalars().first()
