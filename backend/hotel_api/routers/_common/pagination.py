"""
Standardized list parameters for all routers.

Every list endpoint accepts the same query string:
``page``, ``limit``, ``search``, ``sortBy``, ``sortOrder``.

Usage:
    from hotel_api.routers._common.pagination import ListParams, get_list_params

    @router.get("/rooms", response_model=Page[RoomOutput])
    def list_rooms(
        params: ListParams = Depends(get_list_params),
        db: Session = Depends(get_db),
        user: dict = Depends(current_user),
    ):
        return RoomService(db).list(get_tenant_id(user), **params.to_kwargs())
"""

from dataclasses import dataclass
from typing import Any, Literal

from fastapi import Query

from shared.config.constants import Limits


@dataclass
class ListParams:
    """
    Paging, search and sort for one list request.

    Attributes:
        page: 1-indexed page number
        limit: Items per page (1 to MAX_PAGE_SIZE)
        search: Case-insensitive substring over the entity's search fields
        sort_by: Column name, camelCase or snake_case
        sort_order: "asc" or "desc"
    """

    page: int = Limits.DEFAULT_PAGE
    limit: int = Limits.DEFAULT_PAGE_SIZE
    search: str | None = None
    sort_by: str | None = None
    sort_order: str | None = None

    def __post_init__(self):
        """Validate and normalize values."""
        self.page = max(1, self.page)
        self.limit = min(max(1, self.limit), Limits.MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def to_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``BaseCRUDService.list``."""
        return {
            "page": self.page,
            "limit": self.limit,
            "search": self.search,
            "sort_by": self.sort_by,
            "sort_order": self.sort_order,
        }


def get_list_params(
    page: int = Query(default=Limits.DEFAULT_PAGE, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(
        default=Limits.DEFAULT_PAGE_SIZE,
        ge=1,
        le=Limits.MAX_PAGE_SIZE,
        description="Maximum number of items to return",
    ),
    search: str | None = Query(default=None, max_length=Limits.MAX_SEARCH_TERM_LENGTH),
    sort_by: str | None = Query(default=None, alias="sortBy"),
    sort_order: Literal["asc", "desc"] | None = Query(default=None, alias="sortOrder"),
) -> ListParams:
    """
    FastAPI dependency for list endpoints.

    Usage:
        @router.get("/items")
        def list_items(params: ListParams = Depends(get_list_params)):
            ...
    """
    return ListParams(
        page=page,
        limit=limit,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
