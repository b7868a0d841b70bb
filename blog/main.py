import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from blog.config import settings
from blog.exceptions import ArticleNotFoundError, ArticleValidationError, StorageError
from blog.middleware import TimingMiddleware
from blog.routers import articles, users

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.LOG_LEVEL)
    logger.info("Starting blog API (env=%s)", settings.APP_ENV)
    yield

app = FastAPI(
    title="Blog API",
    description="Blog articles with author/admin access control",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(articles.router)
app.include_router(users.router)

# Error mapping
@app.exception_handler(ArticleNotFoundError)
async def article_not_found(request: Request, exc: ArticleNotFoundError):
    return JSONResponse(status_code=404, content={"detail": "Article not found"})

@app.exception_handler(ArticleValidationError)
async def article_invalid(request: Request, exc: ArticleValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})

@app.exception_handler(StorageError)
async def storage_unavailable(request: Request, exc: StorageError):
    return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
