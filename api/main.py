import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core import config, db
from core.log import configure_logging
from products import router as products_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Configuration problems and an unreachable database are fatal at startup.
    settings = config.load_settings()
    configure_logging(settings.log_level)
    if settings.verify_on_startup:
        await db.ping(settings.database)
    app.state.db_settings = settings.database
    logger.info("startup_complete db=%s verified=%s", settings.database.name, settings.verify_on_startup)
    yield


app = FastAPI(lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies/params are plain client errors here (400, not 422).
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid input.", "errors": jsonable_encoder(exc.errors())},
    )


app.include_router(products_router.router, tags=["products"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "product-service api"}


def run() -> None:
    server = config.load_server_settings()
    uvicorn.run("main:app", host=server.host, port=server.port)


if __name__ == "__main__":
    run()
