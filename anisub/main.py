from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import uuid

from anisub import __version__
from anisub.settings import settings
from anisub.logger import REQUEST_ID, setup_logging
from anisub.constants import no_cache_headers
from anisub.routers import catalog

setup_logging()
logger = logging.getLogger("anisub")

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info('Started (catalog=%s index=%s)', settings.catalog_base_url, settings.jimaku_api_base)
    yield
    logger.info('Shutdown')

app = FastAPI(title="AnimeParadise x Jimaku", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    incoming = request.headers.get("x-request-id")
    rid = incoming or uuid.uuid4().hex[:16]
    token = REQUEST_ID.set(rid)
    try:
        response = await call_next(request)
    finally:
        REQUEST_ID.reset(token)
    response.headers["X-Request-ID"] = rid
    return response


app.include_router(catalog.router)

# Health check
@app.get('/healthz')
async def healthz():
    return JSONResponse(content={"status": "ok"}, headers=no_cache_headers)
