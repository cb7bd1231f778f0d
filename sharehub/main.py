import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from . import models
from .api import router as api_router
from .core.config import Settings, get_settings
from .core.errors import register_error_handlers
from .database import make_engine, make_session_factory
from .storage import PUBLIC_PREFIX, FileStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    engine = make_engine(settings.DATABASE_URL)
    # Criar as tabelas
    models.Base.metadata.create_all(bind=engine)

    app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.file_store = FileStore(settings.UPLOAD_DIR)

    # Configurar CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    @app.get("/health", response_class=PlainTextResponse)
    def health():
        return "OK"

    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.mount(PUBLIC_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
    return app


def run():
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Backend rodando em http://%s:%d", settings.HOST, settings.PORT)
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
