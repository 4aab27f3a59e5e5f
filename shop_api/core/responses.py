from pydantic import BaseModel, Field, PlainSerializer
from typing import Annotated, Generic, List, Optional, Tuple, TypeVar
from decimal import Decimal
from sqlalchemy.orm import Query
import math

T = TypeVar("T")

# Request amounts carry at most the 2 decimal places their columns store
InputAmount = Annotated[Decimal, Field(decimal_places=2)]
# Stored decimals go out as JSON numbers
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class Pagination(BaseModel):
    total_data: int
    total_page: int
    page: int
    limit: int


class Envelope(BaseModel, Generic[T]):
    status: bool = True
    message: str
    data: Optional[T] = None


class PaginatedEnvelope(BaseModel, Generic[T]):
    status: bool = True
    message: str
    data: List[T] = []
    pagination: Pagination


def paginate(query: Query, page: int = 1, limit: int = 10) -> Tuple[list, Pagination]:
    """
    Apply page/limit to a query.

    Returns:
        Tuple[list, Pagination]: rows of the requested page and the pagination block
    """
    page = max(1, page)
    limit = max(1, limit)

    total_data = query.count()
    items = query.offset((page - 1) * limit).limit(limit).all()

    return items, Pagination(
        total_data=total_data,
        total_page=math.ceil(total_data / limit),
        page=page,
        limit=limit
    )
