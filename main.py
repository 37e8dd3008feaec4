import logging
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from fastapi_cache.decorator import cache
from pydantic import ValidationError

import config
from models.article_ref import ArticleRef
from models.fetch_error import FetchError, FetchErrorCause
from models.http_requester import HttpxRequester
from models.revision import Revision
from models.revision_fetcher import RevisionFetcher

logging.basicConfig(level=config.LOGLEVEL)
logger = logging.getLogger(__name__)


# noinspection PyShadowingNames
@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup code
    FastAPICache.init(InMemoryBackend())
    async with httpx.AsyncClient() as client:
        app.state.fetcher = RevisionFetcher(requester=HttpxRequester(client))
        yield
    # shutdown code (if needed)


app = FastAPI(title="revision-window-backend", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # or list of allowed origins
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)
api_router = APIRouter(prefix="/api/v2")


def sanitize_errors(errors: Any) -> list[Any]:
    sanitized_errors_ = []
    for error in errors.errors():
        sanitized_errors_.append(
            {
                "loc": list(error["loc"]),  # tuples to lists
                "msg": error["msg"],
                "type": error["type"],
            }
        )
    return sanitized_errors_


def get_fetcher(request: Request) -> RevisionFetcher:
    return request.app.state.fetcher


def fetch_error_status(error: FetchError) -> int:
    if error.is_missing_article:
        return 404
    if error.cause == FetchErrorCause.API:
        return 422
    return 502


@api_router.get("/revisions/{title}", response_model=list[Revision])
@cache(expire=config.CACHE_EXPIRE)
async def get_revision_window(
    title: str,
    site: str = Query(default=config.DEFAULT_SITE, description="Wiki host, e.g. de.wikipedia.org"),
    limit: int = Query(default=10, description="Number of revisions to return, at least 1"),
    ending_revision_id: int = Query(
        default=0,
        description="Newest revision to include. 0 starts at the latest revision.",
    ),
    fetcher: RevisionFetcher = Depends(get_fetcher),
):
    """
    Return the most recent revisions of an article, newest first.

    Args:
        title (str): Article title, underscores or spaces.
        site (str, optional): Wiki host. Defaults to en.wikipedia.org.
        limit (int, optional): Maximum number of revisions. Defaults to 10.
        ending_revision_id (int, optional): Start the listing at this revision
            instead of the latest one. Defaults to 0.

    Returns:
        list[Revision]: At most `limit` revisions, strictly descending by id.

    Raises:
        422: invalid parameters or an API error other than a missing article.
        404: the article does not exist.
        502: the wiki could not be reached or sent an unusable response.

    Example:
        GET /api/v2/revisions/Dog?limit=5 -> 200
        GET /api/v2/revisions/Dog?limit=0 -> 422

    Caching: responses are kept in memory for 60s.
    """
    try:
        article = ArticleRef(site=site, title=title)
        window = await fetcher.fetch_revision_window(
            article, result_limit=limit, ending_revision_id=ending_revision_id
        )
    except ValidationError as e:
        # Forward the error to the user with status 422
        raise HTTPException(status_code=422, detail=sanitize_errors(e)) from e
    except FetchError as e:
        raise HTTPException(
            status_code=fetch_error_status(e),
            detail={"cause": e.cause.value, "code": e.code, "message": e.message},
        ) from e
    return window.revisions


@app.get("/", include_in_schema=False)  # root redirect remains at /
def root_redirect():
    return RedirectResponse(url="/docs")


app.include_router(api_router)
