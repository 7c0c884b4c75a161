from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    success: bool = True
    data: Optional[DataT] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


def ok(data: DataT) -> ApiResponse[DataT]:
    return ApiResponse(data=data)
