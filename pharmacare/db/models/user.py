# pharmacare/db/models/user.py
from sqlalchemy import Column, Integer, String, Date, DateTime, func
from sqlalchemy.orm import relationship
from pharmacare.db.base import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, nullable=True, index=True)
    phone = Column(String(10), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    gender = Column(String(10), nullable=False)  # male | female | other
    date_of_birth = Column(Date, nullable=False)

    # sha256 of the single live refresh token; NULL when logged out
    refresh_token_hash = Column(String(64), nullable=True)

    # pending phone-login OTP
    otp_hash = Column(String(64), nullable=True)
    otp_expires_at = Column(DateTime(timezone=True), nullable=True)
    otp_attempts = Column(Integer, nullable=False, default=0, server_default="0")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    cart_items = relationship("CartItemModel", back_populates="user", cascade="all, delete-orphan")
    wishlist_items = relationship("WishlistItemModel", back_populates="user", cascade="all, delete-orphan")
