import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from genifier.config import settings
from genifier.routers.chat import router as chat_router
from genifier.routers.documents import router as documents_router
from genifier.routers.graph import router as graph_router
from genifier.routers.pipeline import router as pipeline_router
from genifier.services.shell import Shell, build_shell

logging.basicConfig(level=logging.INFO)


def create_app(shell: Shell | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.shell = shell or build_shell()
        await app.state.shell.start()
        try:
            yield
        finally:
            await app.state.shell.close()

    app = FastAPI(title="Genifier Shell API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(pipeline_router)
    app.include_router(graph_router)
    app.include_router(documents_router)
    app.include_router(chat_router)

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    return app


app = create_app()
