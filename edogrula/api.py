"""
HTTP surface for business search and detail lookups.

Run with:
    python -m edogrula.api
"""
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from edogrula.cache import TTLCache
from edogrula.config import FILTER_DEFAULT_PER_PAGE, LOG_LEVEL, SEARCH_CACHE_MAX_ENTRIES
from edogrula.directory import filter_businesses
from edogrula.exceptions import RegistryUnavailable
from edogrula.lookup import find_blacklist_entry, find_business, find_by_handle, find_by_slug
from edogrula.models import MatchStatus
from edogrula.normalizers import normalize_handle, slugify
from edogrula.registry import MongoClientProvider
from edogrula.search_service import SearchService


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
        return response


def build_default_service() -> SearchService:
    """MongoDB-backed search service with an in-process TTL cache."""
    provider = MongoClientProvider()
    return SearchService(
        registry=provider.business_registry(),
        denylist=provider.denylist_registry(),
        cache=TTLCache(max_entries=SEARCH_CACHE_MAX_ENTRIES),
    )


def _not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"success": True, "status": "not_found"})


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "status": "error", "message": message})


def create_app(service: Optional[SearchService] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        service (Optional[SearchService]): Search service to serve. Defaults to
            the MongoDB-backed service, whose client is closed on shutdown.
    """
    owns_service = service is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_service:
            await MongoClientProvider().close()

    app = FastAPI(title="e-Doğrula Search API", version="0.1.0", lifespan=lifespan)
    app.state.search = service or build_default_service()
    app.add_middleware(LoggingMiddleware)

    @app.exception_handler(RegistryUnavailable)
    async def registry_unavailable_handler(request: Request, exc: RegistryUnavailable):
        logger.warning(f"⚠️ Registry unavailable for {request.url.path}: {exc}")
        if request.url.path.endswith("/filter"):
            return JSONResponse(status_code=500, content={"error": "filter_failed", "message": str(exc)})
        message = "Search error" if request.url.path.endswith("/search") else "Detail error"
        return JSONResponse(
            status_code=500,
            content={"success": False, "status": "error", "message": message, "error": str(exc)},
        )

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/api/businesses/search")
    async def search(request: Request, q: str = "", type: str = "", limit: Optional[str] = None):
        return await request.app.state.search.search(q, type, limit)

    @app.get("/api/businesses/filter")
    async def directory(
        request: Request,
        address: str = "",
        type: str = "",
        onlyVerified: str = "false",
        sort: str = "rating",
        page: str = "1",
        perPage: str = str(FILTER_DEFAULT_PER_PAGE),
    ):
        return await filter_businesses(
            request.app.state.search.registry,
            address=address,
            business_type=type,
            only_verified=onlyVerified,
            sort=sort,
            page=page,
            per_page=perPage,
        )

    @app.get("/api/businesses/by-slug/{slug}")
    async def by_slug(request: Request, slug: str):
        if not slugify(slug):
            return _bad_request("Geçersiz slug")
        business = await find_by_slug(request.app.state.search.registry, slug)
        if not business:
            return _not_found()
        return {"success": True, "status": MatchStatus.VERIFIED.value, "business": business}

    @app.get("/api/businesses/handle/{handle}")
    async def by_handle(request: Request, handle: str):
        if not normalize_handle(handle):
            return _bad_request("Geçersiz handle")
        business = await find_by_handle(request.app.state.search.registry, handle)
        if not business:
            return _not_found()
        return {"success": True, "status": MatchStatus.VERIFIED.value, "business": business}

    @app.get("/api/businesses/{identifier}")
    async def by_identifier(request: Request, identifier: str):
        service = request.app.state.search
        result = await find_business(service.registry, service.denylist, identifier)
        if result.status == MatchStatus.NOT_FOUND:
            return JSONResponse(
                status_code=404,
                content={"success": True, "status": "not_found", "message": "İşletme bulunamadı"},
            )
        return {"success": True, "status": result.status.value, "business": result.primary}

    @app.get("/api/blacklist/{id_or_slug}")
    async def blacklist_entry(request: Request, id_or_slug: str):
        entry = await find_blacklist_entry(request.app.state.search.denylist, id_or_slug)
        if not entry:
            return JSONResponse(
                status_code=404,
                content={"success": False, "message": "Bulunamadı", "code": "NOT_FOUND"},
            )
        return {"success": True, "blacklist": entry}

    return app


if __name__ == "__main__":
    logger.remove()
    logger.add(sys.stderr, level=LOG_LEVEL, format="<green>{time:HH:mm:ss}</green> | <level>{message}</level>")
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
