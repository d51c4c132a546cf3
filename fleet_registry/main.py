import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fleet_registry.config import Settings, settings as default_settings
from fleet_registry.database import Database
from fleet_registry.seed import seed_data
from fleet_registry.routers.vehicles import router as vehicles_router
from fleet_registry.utils.exceptions import register_exception_handlers
from fleet_registry.utils.response import success_response

SERVICE_NAME = "fleet-registry-api"
VERSION = "0.1.0"


def _configure_logging(level: str) -> None:
    logger = logging.getLogger("fleet_registry")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)-7s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    logger.addHandler(handler)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    _configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(settings.database_url, echo=settings.echo_sql)
        app.state.db = database
        await database.create_tables()
        if settings.seed_on_startup:
            async with database.session() as session:
                await seed_data(session)
        yield
        await database.close()

    app = FastAPI(
        title="Fleet Registry API",
        description="Vehicle fleet registry: CRUD, filtered listing and dashboard counts",
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(vehicles_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        return success_response(data={"service": SERVICE_NAME, "version": VERSION})

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("fleet_registry.main:app", host="0.0.0.0", port=8000)
