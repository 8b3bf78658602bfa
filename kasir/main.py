# Main application file



import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kasir.database import engine, Base, SessionLocal, get_db
from kasir.core.rate_limiter import limiter
from kasir.core.config import settings
from kasir.seed import seed_products
from kasir.routers import (
    products,
    drafts,
    transactions,
    inventory,
    reports,
    store_settings,
)


# LOGGING CONFIGURATION

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
)

logger = logging.getLogger("kasir")


# STARTUP

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Stores are created when absent; there are no migrations
    Base.metadata.create_all(bind=engine)

    if settings.SEED_SAMPLE_PRODUCTS:
        with SessionLocal() as db:
            seed_products(db)

    logger.info(f"E-Kasir started ({settings.ENV})")
    yield


# APP INIT

app = FastAPI(
    title="E-Kasir POS API",
    description="Point-of-sale backend: catalog, cart sessions, checkout, stock and sales reports",
    version="1.0.0",
    lifespan=lifespan,
)



# CORS

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type"],
)


# RATE LIMITING

app.state.limiter = limiter
app.add_exception_handler(
    RateLimitExceeded,
    _rate_limit_exceeded_handler
)


# REQUEST LOGGING MIDDLEWARE

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    duration = round((time.time() - start_time) * 1000, 2)

    logger.info(
        f"{request.method} {request.url.path} "
        f"Status: {response.status_code} "
        f"Time: {duration}ms"
    )

    return response


# ROUTERS

app.include_router(products.router)
app.include_router(drafts.router)
app.include_router(transactions.router)
app.include_router(inventory.router)
app.include_router(reports.router)
app.include_router(store_settings.router)



# ROOT

@app.get("/")
def root(db: Session = Depends(get_db)):
    logger.info("Health check endpoint called")

    try:
        db.execute(text("SELECT 1"))
        database = "available"
    except SQLAlchemyError as e:
        logger.error(f"Store unavailable: {e}")
        database = "unavailable"

    return {"message": "E-Kasir POS API is running", "database": database}
