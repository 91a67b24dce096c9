"""
api/routes/v1/catalog.py -- Read-only movie catalog endpoints.

Every route here sits behind the access gate: the router-level dependency
runs require_subject() before any handler, so an unauthenticated request
never reaches the catalog store.

Store failures are not caught here. The catch-all handler in api/main.py
logs them and returns a generic 500, so no request is left without a
response.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from api.models import CatalogListResponse, MovieDetailResponse, PopularResponse, TrendingResponse
from auth.dependencies import require_subject
from catalog.store import CatalogStore

# Auth policy:
# - GET /movies-app/*: requires a bearer token (router-level dependency)
router = APIRouter(prefix="/movies-app", dependencies=[Depends(require_subject)])

_LIST_CACHE = "public, max-age=300, s-maxage=600"
_SEARCH_CACHE = "public, max-age=60, s-maxage=120"


def _store(request: Request) -> CatalogStore:
    return request.app.state.catalog


@router.get("/top-rated-movies", response_model=CatalogListResponse)
def top_rated_movies(request: Request, response: Response) -> CatalogListResponse:
    docs = _store(request).list_collection("top_rated")
    response.headers["Cache-Control"] = _LIST_CACHE
    return CatalogListResponse(results=docs, total=len(docs))


@router.get("/trending-movies", response_model=TrendingResponse)
def trending_movies(request: Request, response: Response) -> TrendingResponse:
    docs = _store(request).list_collection("trending")
    response.headers["Cache-Control"] = _LIST_CACHE
    return TrendingResponse(data=docs)


@router.get("/originals", response_model=CatalogListResponse)
def originals(request: Request, response: Response) -> CatalogListResponse:
    docs = _store(request).list_collection("originals")
    response.headers["Cache-Control"] = _LIST_CACHE
    return CatalogListResponse(results=docs, total=len(docs))


@router.get("/popular-movies", response_model=PopularResponse)
def popular_movies(request: Request, response: Response) -> PopularResponse:
    docs = _store(request).list_collection("popular")
    response.headers["Cache-Control"] = _LIST_CACHE
    return PopularResponse(results=docs, length=len(docs))


@router.get("/movies-search", response_model=CatalogListResponse)
def movies_search(
    request: Request,
    response: Response,
    search: Annotated[str, Query(max_length=200)] = "",
) -> CatalogListResponse:
    """Case-insensitive title substring search over movie detail documents."""
    term = search.strip()
    if not term:
        raise HTTPException(
            status_code=400,
            detail={"code": "invalid_input", "message": "Search query is required."},
        )
    docs = _store(request).search(term)
    response.headers["Cache-Control"] = _SEARCH_CACHE
    return CatalogListResponse(results=docs, total=len(docs))


@router.get("/movies/{movie_id}", response_model=MovieDetailResponse)
def movie_details(request: Request, response: Response, movie_id: str) -> MovieDetailResponse:
    doc = _store(request).get_movie(movie_id)
    if doc is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "No movie found."},
        )
    response.headers["Cache-Control"] = _LIST_CACHE
    return MovieDetailResponse(movie_details=doc)
