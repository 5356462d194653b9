from typing import Generic, Optional, TypeVar
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar('T')


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire and accepts snake_case in code"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class DataRequest(BaseModel, Generic[T]):
    """Request envelope used by the API: {"data": {...}}"""
    data: Optional[T] = None


class DeletedResponse(BaseModel):
    """Response carrying the id of a deleted record"""
    id: str
