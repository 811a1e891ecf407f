# FILE: inland/server.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from inland.api import articles, auth, sites
from inland.core.config import Settings
from inland.core.database import init_models, make_engine, make_sessionmaker
from inland.core.errors import InlandError
from inland.services.github_client import GitHubClient

logger = logging.getLogger("inland.api")


def create_app(
    settings: Optional[Settings] = None,
    hosting=None,
    auth_provider=None,
) -> FastAPI:
    """
    Build the API. `hosting` / `auth_provider` default to one GitHubClient;
    tests pass in fakes.
    """
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    github = GitHubClient(settings)
    engine = make_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await init_models(engine)
        yield
        await engine.dispose()

    app = FastAPI(title="Inland CMS", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionmaker = make_sessionmaker(engine)
    app.state.hosting = hosting or github
    app.state.auth_provider = auth_provider or github

    @app.exception_handler(InlandError)
    async def inland_error_handler(request: Request, exc: InlandError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {type(exc).__name__}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/api/health")
    async def health():
        return {"ok": True}

    app.include_router(auth.router)
    app.include_router(sites.router)
    app.include_router(articles.router)

    app.add_middleware(
        CORSMiddleware,
        allow_credentials=True,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app
