from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from blog.clock import Clock
from blog.database import get_db
from blog.dependencies import PaginationParams, get_clock, get_requester, require_requester
from blog.exceptions import ArticleNotFoundError
from blog.models import Article
from blog.policy import Requester, can_modify, can_view
from blog.schemas import ArticleCreate, ArticleDetail, ArticleSummary, ArticleUpdate, PaginatedResponse
from blog.services import article_service

router = APIRouter(prefix="/api/v1/articles", tags=["articles"])


async def _load_modifiable(db: AsyncSession, article_id: int, requester: Requester) -> Article:
    # Not viewable reads as not found so private articles stay hidden.
    article = await article_service.get_details(db, article_id)
    if not can_view(requester, article):
        raise ArticleNotFoundError(article_id)
    if not can_modify(requester, article):
        raise HTTPException(status_code=403, detail="Not allowed to modify this article")
    return article

@router.get("", response_model=PaginatedResponse)
async def list_articles(
    pagination: PaginationParams = Depends(),
    include_drafts: bool = Query(False, description="Admins only: include unpublished articles."),
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    public_only = not (include_drafts and requester.is_admin)
    return await article_service.get_published_page(
        db, pagination.page, pagination.page_size, public_only=public_only
    )

@router.get("/mine", response_model=list[ArticleSummary])
async def list_my_articles(
    requester: Requester = Depends(require_requester),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.list_by_author(db, requester.user_id)

@router.get("/{article_id}", response_model=ArticleDetail)
async def get_article(
    article_id: int,
    requester: Requester = Depends(get_requester),
    db: AsyncSession = Depends(get_db),
):
    article = await article_service.get_details(db, article_id)
    if not can_view(requester, article):
        raise ArticleNotFoundError(article_id)
    return article

@router.post("", status_code=201, response_model=ArticleDetail)
async def create_article(
    data: ArticleCreate,
    requester: Requester = Depends(require_requester),
    db: AsyncSession = Depends(get_db),
):
    article_id = await article_service.create_article(
        db, data.title, data.content, requester.user_id
    )
    return await article_service.get_details(db, article_id)

@router.put("/{article_id}", response_model=ArticleDetail)
async def update_article(
    article_id: int,
    data: ArticleUpdate,
    requester: Requester = Depends(require_requester),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    await _load_modifiable(db, article_id, requester)
    return await article_service.edit_article(db, article_id, data.title, data.content, now=clock)

@router.delete("/{article_id}", status_code=204)
async def delete_article(
    article_id: int,
    requester: Requester = Depends(require_requester),
    db: AsyncSession = Depends(get_db),
):
    await _load_modifiable(db, article_id, requester)
    await article_service.delete_article(db, article_id)

@router.post("/{article_id}/visibility", response_model=ArticleDetail)
async def toggle_visibility(
    article_id: int,
    requester: Requester = Depends(require_requester),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    await _load_modifiable(db, article_id, requester)
    return await article_service.toggle_visibility(db, article_id, now=clock)
