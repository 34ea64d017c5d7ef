from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from application.catalog import CatalogMirror
from application.sync import parse_item_id
from server.api.rest.dependencies import get_catalog_mirror
from server.models.schemas import MovieResponse, MoviesResponse, StreamResponse

router = APIRouter(prefix="/api/v1/movies", tags=["movies-v1"])


@router.get("/trending", response_model=MoviesResponse)
async def trending(mirror: CatalogMirror = Depends(get_catalog_mirror)) -> MoviesResponse:
    items = await mirror.trending()
    return MoviesResponse(movies=[i.to_dict() for i in items])


@router.get("/popular", response_model=MoviesResponse)
async def popular(mirror: CatalogMirror = Depends(get_catalog_mirror)) -> MoviesResponse:
    items = await mirror.popular()
    return MoviesResponse(movies=[i.to_dict() for i in items])


# Registered before /{item_id} so "search" is not parsed as an id.
@router.get("/search", response_model=MoviesResponse)
async def search(
    q: str = Query(default=""),
    mirror: CatalogMirror = Depends(get_catalog_mirror),
) -> MoviesResponse:
    items = await mirror.search(q)
    return MoviesResponse(movies=[i.to_dict() for i in items])


@router.get("/{item_id}", response_model=MovieResponse)
async def movie_detail(item_id: str, mirror: CatalogMirror = Depends(get_catalog_mirror)) -> MovieResponse:
    item = await mirror.detail(parse_item_id(item_id))
    return MovieResponse(movie=item.to_dict())


@router.get("/{item_id}/stream", response_model=StreamResponse)
async def movie_stream(item_id: str, mirror: CatalogMirror = Depends(get_catalog_mirror)) -> StreamResponse:
    link = await mirror.stream(parse_item_id(item_id))
    return StreamResponse(**link.to_dict())
