import logging
import sys
import time
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request

from api.shared.entities.registry import BaseEntity
from api.shared.dtos import HealthCheckResponse
from api.shared.exceptions import ChatBackendException
from core.settings import SETTINGS
from di.container import ApplicationContainer as DependencyContainer

# Configure logging
logging.basicConfig(
    level=getattr(logging, SETTINGS.APP.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
        if SETTINGS.APP.JSON_LOGS
        else structlog.dev.ConsoleRenderer(),
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger("chat")
access_logger = logging.getLogger("chat.access")


class CustomFastAPI(FastAPI):
    container: DependencyContainer


@asynccontextmanager
async def lifespan(_app: CustomFastAPI):
    logger.info("Starting application initialization...")
    start_time = time.time()

    try:
        logger.info("Initializing database connection...")
        db_start = time.time()
        db_resource = _app.container.infrastructure.database()
        await db_resource.init()
        await db_resource.connect()
        logger.info(
            f"✅ Database connection established in {time.time() - db_start:.2f}s"
        )

        if SETTINGS.DATABASE.DB_AUTO_CREATE_TABLES:
            await db_resource.create_tables(BaseEntity.metadata)
            logger.info("Database tables ensured")

        gateway = _app.container.infrastructure.model_gateway()
        if not gateway.is_configured():
            logger.warning(
                "LLM provider URL or model not set; replies will report missing_provider"
            )

        logger.info(
            f"✅ Application startup completed in {time.time() - start_time:.2f}s"
        )
    except Exception as e:
        logger.exception(f"❌ Failed to initialize application: {str(e)}")
        raise

    yield

    db_resource = _app.container.infrastructure.database()
    if db_resource:
        await db_resource.shutdown()
    logger.info("Application shutdown complete")


def create_fastapi_app() -> CustomFastAPI:
    _app = CustomFastAPI(
        title="Chat Backend API",
        description="Users, conversations and messages with model-generated assistant replies",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Initialize dependency container
    _app.container = DependencyContainer()
    _app.container.infrastructure.config.from_dict(SETTINGS.model_dump())
    _app.container.init_resources()

    _app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include feature routers
    from api.features.conversation.router import router as conversation_router
    from api.features.users.router import router as users_router

    _app.include_router(
        conversation_router, prefix="/conversations", tags=["Conversations"]
    )
    _app.include_router(users_router, prefix="/users", tags=["Users"])

    return _app


app = create_fastapi_app()


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    access_logger.info(
        f"{request.method} {request.url.path} {response.status_code} "
        f"{(time.time() - start) * 1000:.1f}ms"
    )
    return response


# Health check endpoints
@app.get("/")
async def root():
    return {"ok": True, "service": "bot-gpt"}


@app.get("/health", response_model=HealthCheckResponse)
async def health():
    return HealthCheckResponse(status="ok")


# Exception handlers
@app.exception_handler(ChatBackendException)
async def domain_exception_handler(request: Request, exc: ChatBackendException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, **exc.payload},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={"error": f"{location}: {message}" if location else message},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": str(exc) or "Internal Server Error"},
    )


def run() -> None:
    uvicorn.run(app, host=SETTINGS.APP.HOST, port=SETTINGS.APP.PORT)


if __name__ == "__main__":
    run()
