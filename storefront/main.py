# storefront/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
import uvicorn

from storefront.api.routers import auth, cart, health, orders, products, users
from storefront.data import models  # noqa: F401  registers every table on Base.metadata
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.seed import seed_admin
from storefront.domain.errors import ErrorCode, HttpError
from storefront.utils.logging import RequestLoggingMiddleware, configure_logging, get_logger

logger = get_logger(__name__)


def _error_body(message: str, error_code: int, errors=None) -> dict:
    return {"message": message, "errorCode": int(error_code), "errors": errors}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HttpError)
    async def handle_http_error(request: Request, exc: HttpError):
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(_error_body(exc.message, exc.error_code, exc.errors)),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content=jsonable_encoder(
                _error_body("Unprocessable entity", ErrorCode.UNPROCESSABLE_ENTITY, exc.errors())
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}",
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("Something went wrong", ErrorCode.INTERNAL_EXCEPTION),
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
    seed_admin(SessionLocal)
    yield


def create_app(init_db: bool = True) -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Storefront",
        version="1.0.0",
        lifespan=lifespan if init_db else None,
    )
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(health.router)
    for module in (auth, users, products, cart, orders):
        app.include_router(module.router, prefix="/api")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
