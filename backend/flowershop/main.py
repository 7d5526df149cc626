import logging
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from flowershop.core.config import settings
from flowershop.core.db import Base, engine
from flowershop.core.errors import ShopError
from flowershop.core.logging import configure_logging
from flowershop.routes import cart, categories, favorites, orders, products, users
from flowershop.schemas.error import ErrorResponse
from flowershop.services.scheduler import OrderStatusScheduler

# Import models so Base.metadata knows them
import flowershop.models  # noqa

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables (Alembic optional)
    Base.metadata.create_all(bind=engine)

    scheduler = OrderStatusScheduler()
    app.state.scheduler = scheduler
    if settings.SCHEDULER_ENABLED:
        scheduler.start()
    logger.info("Flower shop backend started")
    yield
    await scheduler.stop()
    logger.info("Flower shop backend stopped")


app = FastAPI(title="Flower Shop Backend", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=600,
)


@app.exception_handler(ShopError)
async def shop_error_handler(request: Request, exc: ShopError):
    status = HTTPStatus(exc.status_code)
    body = ErrorResponse(message=exc.message, status=status.name, status_code=status.value)
    return JSONResponse(status_code=status.value, content=body.model_dump(by_alias=True))


app.include_router(users.router)
app.include_router(categories.router)
app.include_router(products.router)
app.include_router(orders.router)
app.include_router(favorites.router)
app.include_router(cart.router)


@app.get("/")
def health():
    return {"status": "ok"}
