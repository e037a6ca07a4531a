from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from contextlib import asynccontextmanager

from core.cache import cache
from core.config import settings
from core.errors import RequestError, database_error_handler, request_error_handler
from core.logging import setup_logging
from db.database import create_db_and_tables
from routers.status import router as status_router
from routers.users import router as users_router
from routers.products import router as products_router
from routers.recipes import router as recipes_router
from routers.refills import router as refills_router
from routers.locations import router as locations_router
from routers.warehouses import router as warehouses_router
from routers.files import router as files_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    cache.configure(settings.cache_url)
    await create_db_and_tables()
    yield
    await cache.close()


app = FastAPI(
    title="Scrounch API",
    description="API for selling products, managing recipes, stock and account refills",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(RequestError, request_error_handler)
app.add_exception_handler(SQLAlchemyError, database_error_handler)

app.include_router(status_router, prefix="/status", tags=["status"])
app.include_router(users_router, prefix="/user", tags=["user"])
app.include_router(products_router, prefix="/product", tags=["product"])
app.include_router(recipes_router, prefix="/recipe", tags=["recipe"])
app.include_router(refills_router, prefix="/refill", tags=["refill"])
app.include_router(locations_router, prefix="/location", tags=["location"])
app.include_router(warehouses_router, prefix="/warehouse", tags=["warehouse"])
app.include_router(files_router, prefix="/files", tags=["files"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
