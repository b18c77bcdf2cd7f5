import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from notes_tasks_database.db import create_db_engine, create_session_factory
from notes_tasks_database.init_db import init_db

from .config import Settings
from .errors import register_exception_handlers
from .routes import router

logger = logging.getLogger(__name__)

STATIC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "static"))


def _page(filename: str):
    path = os.path.join(STATIC_DIR, filename)

    def serve():
        return FileResponse(path, media_type="text/html")

    return serve


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, engine=None) -> FastAPI:
    """
    Builds the application.

    Settings, engine and session factory are created here once and kept on
    ``app.state``; request handlers reach them only through dependencies.
    Tables are created if they do not exist yet.
    """
    settings = settings or Settings.from_env()
    engine = engine if engine is not None else create_db_engine(settings.database_url)
    init_db(engine)
    logger.info("Using database %s", engine.url.render_as_string(hide_password=True))

    app = FastAPI(
        title="Notes & Tasks API",
        description="Backend API for user auth, personal notes and task lists.",
        version="1.0.0",
        openapi_tags=[
            {"name": "Authentication", "description": "Signup, signin, signout and profile"},
            {"name": "Notes", "description": "Create, update, view, delete, search notes"},
            {"name": "Tasks", "description": "Create, update, complete, delete tasks"},
        ],
    )
    app.state.settings = settings
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(router)

    # Static pages
    app.add_api_route("/", _page("index.html"), methods=["GET"], include_in_schema=False)
    app.add_api_route("/signin", _page("signin.html"), methods=["GET"], include_in_schema=False)
    app.add_api_route("/signup", _page("signup.html"), methods=["GET"], include_in_schema=False)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    return app
