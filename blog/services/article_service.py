"""
Article service — reads and writes for the Article aggregate.

Design notes
------------
- No authorization happens here.  Callers decide with ``blog.policy``
  first and only then invoke a mutating or detail-returning function.
  Listing functions filter by visibility themselves.
- Every listing shares one ordering: ``published_on`` newest first,
  never-published articles after all published ones, ties broken by
  ``id``.  ``published_on IS NULL`` is sorted explicitly instead of relying
  on dialect-specific NULLS LAST defaults.
- ``edit_article`` and ``toggle_visibility`` are silent no-ops on a missing
  id; ``delete_article`` raises ``ArticleNotFoundError``.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
- ``SQLAlchemyError`` is re-raised as ``StorageError``.  No retries.
"""
import logging
import math
from contextlib import contextmanager

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blog.clock import Clock, utc_now
from blog.exceptions import ArticleNotFoundError, ArticleValidationError, StorageError
from blog.models import Article
from blog.schemas import PaginatedResponse

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_LISTING_ORDER = (
    Article.published_on.is_(None),
    Article.published_on.desc(),
    Article.id.asc(),
)


@contextmanager
def _storage_errors(operation: str):
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Storage failure during %s: %s", operation, exc)
        raise StorageError(operation) from exc


def _visibility_filter(public_only: bool):
    return [Article.is_public.is_(True)] if public_only else []


def _article_summary_to_dict(article: Article) -> dict:
    """Serialise an Article to the list projection (no content)."""
    return {
        "id": article.id,
        "title": article.title,
        "author_id": article.author_id,
        "is_public": article.is_public,
        "published_on": article.published_on,
        "created_at": article.created_at,
    }


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

async def list_published(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 20,
    public_only: bool = True,
) -> list[dict]:
    """
    Return one page of article summaries.

    *page* is 1-based; values below 1 are treated as page 1.  A page past
    the end yields an empty list.  *page_size* must be positive.
    """
    if page_size < 1:
        raise ArticleValidationError(f"page_size must be positive, got {page_size}")
    page = max(page, 1)

    q = (
        select(Article)
        .where(*_visibility_filter(public_only))
        .order_by(*_LISTING_ORDER)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    with _storage_errors("list_published"):
        result = await db.execute(q)
    return [_article_summary_to_dict(a) for a in result.scalars().all()]


async def count_published(db: AsyncSession, public_only: bool = True) -> int:
    """Number of articles ``list_published`` pages over with the same filter."""
    q = select(func.count()).select_from(Article).where(*_visibility_filter(public_only))
    with _storage_errors("count_published"):
        return (await db.execute(q)).scalar_one()


async def get_published_page(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 20,
    public_only: bool = True,
) -> PaginatedResponse:
    """Return a page of summaries together with the totals a pager needs."""
    total = await count_published(db, public_only=public_only)
    items = await list_published(db, page, page_size, public_only=public_only)
    return PaginatedResponse(
        items=items,
        total=total,
        page=max(page, 1),
        page_size=page_size,
        pages=math.ceil(total / page_size) if total > 0 else 0,
    )


async def list_by_author(db: AsyncSession, author_id: int) -> list[dict]:
    """All of *author_id*'s articles regardless of visibility."""
    q = select(Article).where(Article.author_id == author_id).order_by(*_LISTING_ORDER)
    with _storage_errors("list_by_author"):
        result = await db.execute(q)
    return [_article_summary_to_dict(a) for a in result.scalars().all()]


async def is_owned_by(db: AsyncSession, article_id: int, user_id: int) -> bool:
    """False when the article is missing or belongs to someone else."""
    q = (
        select(func.count())
        .select_from(Article)
        .where(Article.id == article_id, Article.author_id == user_id)
    )
    with _storage_errors("is_owned_by"):
        return (await db.execute(q)).scalar_one() > 0


async def get_details(db: AsyncSession, article_id: int) -> Article | None:
    with _storage_errors("get_details"):
        result = await db.execute(select(Article).where(Article.id == article_id))
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

async def create_article(db: AsyncSession, title: str, content: str, author_id: int) -> int:
    """Insert a new draft and return its id."""
    article = Article(
        title=title,
        content=content,
        author_id=author_id,
        is_public=False,
        published_on=None,
    )
    db.add(article)
    with _storage_errors("create_article"):
        await db.flush()
        await db.refresh(article)
    logger.info("Article %d created by user %d", article.id, author_id)
    return article.id


async def edit_article(
    db: AsyncSession, article_id: int, title: str, content: str, now: Clock = utc_now
) -> Article | None:
    """
    Overwrite title and content, sending the article back to draft.

    Edited content has to be approved again, so ``is_public`` is forced to
    False.  ``published_on`` keeps its first-publication value.
    Returns None (and changes nothing) when the article does not exist.
    """
    article = await get_details(db, article_id)
    if article is None:
        return None

    article.title = title
    article.content = content
    article.is_public = False
    article.updated_at = now()
    with _storage_errors("edit_article"):
        await db.flush()
    return article


async def delete_article(db: AsyncSession, article_id: int) -> None:
    """Remove the article permanently; raises ArticleNotFoundError if missing."""
    article = await get_details(db, article_id)
    if article is None:
        raise ArticleNotFoundError(article_id)

    with _storage_errors("delete_article"):
        await db.delete(article)
        await db.flush()
    logger.info("Article %d deleted", article_id)


async def toggle_visibility(
    db: AsyncSession, article_id: int, now: Clock = utc_now
) -> Article | None:
    """
    Flip ``is_public``.

    The first transition to public stamps ``published_on`` with ``now()``;
    later toggles never touch it.  Returns None (and changes nothing) when
    the article does not exist.
    """
    article = await get_details(db, article_id)
    if article is None:
        return None

    stamp = now()
    article.is_public = not article.is_public
    if article.is_public and article.published_on is None:
        article.published_on = stamp
    article.updated_at = stamp

    with _storage_errors("toggle_visibility"):
        await db.flush()
    logger.info(
        "Article %d is now %s", article_id, "public" if article.is_public else "draft"
    )
    return article
