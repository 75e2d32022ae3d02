from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .datasources.base import DataSource
from .datasources.github_adapter import GitHubAdapter
from .db import create_db_engine, create_session_factory, init_db
from .errors import GitHubApiError
from .schemas import RepositoryResponse, SearchRequest, SearchResponse
from .services.search import SearchService
from .services.store import DEFAULT_SORT, RepositoryStore

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again later."

router = APIRouter(prefix="/api/github")


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_search_service(request: Request, db: Session = Depends(get_db)) -> SearchService:
    return SearchService(request.app.state.github, RepositoryStore(db))


@router.post("/search", response_model=SearchResponse)
async def search(body: SearchRequest, service: SearchService = Depends(get_search_service)):
    return await service.search_and_save(body)


@router.get("/repositories", response_model=List[RepositoryResponse])
def list_repositories(
    language: Optional[str] = Query(None),
    min_stars: Optional[int] = Query(None, alias="minStars"),
    sort: str = Query(DEFAULT_SORT),
    service: SearchService = Depends(get_search_service),
):
    return service.list_stored(language=language, min_stars=min_stars, sort=sort)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def error_body(status: int, message: str) -> dict:
    return {"timestamp": _timestamp(), "status": status, "error": message}


def field_errors(exc: RequestValidationError) -> Dict[str, str]:
    """Flatten pydantic errors into ``{field: message}``."""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        field = str(loc[-1]) if loc else "request"
        # ValueError raised in a validator: report its own text, not pydantic's prefix
        cause = (err.get("ctx") or {}).get("error")
        errors[field] = str(cause) if cause is not None else err.get("msg", "Invalid value")
    return errors


async def handle_github_error(request: Request, exc: GitHubApiError) -> JSONResponse:
    logger.error(f"[api] GitHub call failed ({exc.kind.value}): {exc.message}; cause={exc.__cause__!r}")
    return JSONResponse(status_code=502, content=error_body(502, exc.message))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = field_errors(exc)
    logger.info(f"[api] rejected {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=400,
        content={"timestamp": _timestamp(), "status": 400, "errors": errors},
    )


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"[api] unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=error_body(500, GENERIC_ERROR_MESSAGE))


def create_app(settings: Optional[Settings] = None, github: Optional[DataSource] = None) -> FastAPI:
    """Build the app. ``github`` replaces the real GitHub adapter when given."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = create_db_engine(settings.database_url, echo=settings.database_echo)
        init_db(engine)
        app.state.session_factory = create_session_factory(engine)
        owned = github is None
        app.state.github = GitHubAdapter(settings) if owned else github
        logger.info(f"GitHub Searcher started, GitHub API at {settings.github_base_url}")
        try:
            yield
        finally:
            if owned:
                await app.state.github.aclose()
            engine.dispose()

    app = FastAPI(title="GitHub Searcher", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(GitHubApiError, handle_github_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.get("/health")
    def health(db: Session = Depends(get_db)):
        return {
            "status": "ok",
            "timestamp": _timestamp(),
            "repositories": RepositoryStore(db).count(),
        }

    app.include_router(router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8020)
