from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import EmailStr, Field, field_validator

from pharmacare.schemas.shared import CamelModel

PHONE_PATTERN = r"^\d{10}$"
Phone = Annotated[str, Field(pattern=PHONE_PATTERN, description="Exactly 10 digits")]


class TokenType(Enum):
    bearer = "bearer"


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    token_type: TokenType = TokenType.bearer
    expires_in: int


class UserGender(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class RegisterRequest(CamelModel):
    name: Annotated[str, Field(min_length=3, max_length=50)]
    email: EmailStr
    password: Annotated[str, Field(min_length=8, max_length=20)]
    phone: Phone
    date_of_birth: date
    gender: UserGender

    @field_validator("password")
    @classmethod
    def _password_strength(cls, value: str) -> str:
        rules = [
            (r"[A-Z]", "one uppercase letter"),
            (r"[a-z]", "one lowercase letter"),
            (r"[0-9]", "one number"),
            (r"[@$!%*?&#]", "one special character"),
        ]
        missing = [label for pattern, label in rules if not re.search(pattern, value)]
        if missing:
            raise ValueError("Password must contain at least " + ", ".join(missing))
        return value

    @field_validator("date_of_birth")
    @classmethod
    def _plausible_age(cls, value: date) -> date:
        age = date.today().year - value.year
        if age < 0 or age > 150:
            raise ValueError("Date of birth must be a valid age.")
        return value


class LoginRequest(CamelModel):
    phone: Phone
    password: Annotated[str, Field(min_length=1, max_length=128)]


class OtpRequest(CamelModel):
    phone: Phone


class OtpVerifyRequest(CamelModel):
    phone: Phone
    otp: Annotated[str, Field(pattern=r"^\d{4,8}$")]


class RefreshRequest(CamelModel):
    refresh_token: Annotated[str, Field(min_length=1)]


class DoctorRegisterRequest(CamelModel):
    phone: Phone
    email: Optional[EmailStr] = None
    password: Annotated[str, Field(min_length=8, max_length=128)]


class UserOut(CamelModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: str
    gender: str
    date_of_birth: date


class UserSession(CamelModel):
    user: UserOut
    tokens: TokenPair


class OtpSent(CamelModel):
    phone: str
    expires_at: datetime
