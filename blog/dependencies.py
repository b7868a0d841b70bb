from fastapi import Depends, Header, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from blog.clock import Clock, utc_now
from blog.config import settings
from blog.database import get_db
from blog.policy import Requester
from blog.services import user_service


class PaginationParams:
    """
    Reusable FastAPI dependency that parses and validates pagination
    query parameters.

    Usage in a router::

        @router.get("/articles")
        async def list_articles(pagination: PaginationParams = Depends(PaginationParams)):
            ...

    Attributes
    ----------
    page:
        1-based page number (minimum 1; lower values are rejected with 422).
    page_size:
        Number of items per page, clamped to ``settings.MAX_PAGE_SIZE``
        regardless of the value supplied by the caller.
    """

    def __init__(
        self,
        page: int = Query(
            1,
            ge=1,
            description="Page number (1-based).",
        ),
        page_size: int = Query(
            settings.DEFAULT_PAGE_SIZE,
            ge=1,
            le=100,
            description="Number of items returned per page (max 100).",
        ),
    ) -> None:
        self.page = page
        # Respect the application-level hard ceiling even if the schema
        # already validates le=100, so a settings change is sufficient.
        self.page_size = min(page_size, settings.MAX_PAGE_SIZE)


async def get_requester(
    x_user_id: int | None = Header(None, description="Id of the calling user."),
    db: AsyncSession = Depends(get_db),
) -> Requester:
    """
    Resolve the caller's identity from the ``X-User-Id`` header.

    No header means an anonymous requester.  An id that does not match a
    user is rejected with 401 rather than silently downgraded.
    """
    if x_user_id is None:
        return Requester.anonymous()
    user = await user_service.get_user_record(db, x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return Requester(user_id=user.id, is_admin=user.is_admin)


async def require_requester(requester: Requester = Depends(get_requester)) -> Requester:
    if not requester.is_authenticated:
        raise HTTPException(status_code=401, detail="Authentication required")
    return requester


def get_clock() -> Clock:
    """Clock used for publish timestamps; overridden in tests."""
    return utc_now
