from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
import httpx
from anisub.settings import settings
from anisub.constants import no_cache_headers
from anisub.services.pipeline import ReconciliationPipeline

router = APIRouter()


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=settings.request_timeout,
        headers={"User-Agent": settings.user_agent},
    )


@router.get('/search')
async def search(q: str = Query(..., min_length=1)):
    """Titles matching ``q`` that have subtitles in the index."""
    async with _client() as client:
        results = await ReconciliationPipeline(client, settings).search(q)
    return JSONResponse(content=[r.to_dict() for r in results], headers=no_cache_headers)


@router.get('/details')
async def details(url: str = Query(..., min_length=1)):
    async with _client() as client:
        info = await ReconciliationPipeline(client, settings).extract_details(url)
    return JSONResponse(content=[info.to_dict()], headers=no_cache_headers)


@router.get('/episodes')
async def episodes(url: str = Query(..., min_length=1)):
    """Episodes of the title at ``url`` that have a subtitle file."""
    async with _client() as client:
        listing = await ReconciliationPipeline(client, settings).list_episodes(url)
    return JSONResponse(content=[ep.to_dict() for ep in listing], headers=no_cache_headers)


@router.get('/stream')
async def stream(url: str = Query(..., min_length=1)):
    async with _client() as client:
        resolution = await ReconciliationPipeline(client, settings).resolve_stream(url)
    return JSONResponse(content=resolution.to_dict(), headers=no_cache_headers)
