from typing import Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

EnvelopeStatus = Literal["Success", "Pending", "Failed"]


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    status: EnvelopeStatus = "Success"
    status_code: int = Field(200, alias="statusCode")
    message: str
    data: Optional[T] = None

    @classmethod
    def ok(cls, data=None, message: str = "OK", status_code: int = 200, status: EnvelopeStatus = "Success"):
        return cls(status=status, status_code=status_code, message=message, data=data)
