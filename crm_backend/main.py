from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from crm_backend.api.api import api_router
from crm_backend.api.middleware import register_error_handlers
from crm_backend.core.config import get_settings
from crm_backend.core.metrics import instrument_app
from crm_backend.core.logging import get_logger
from crm_backend.db.session import close_db, init_db
from crm_backend.utils.decorators import log_request

logger = get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info("Application startup")
    init_db()
    yield
    close_db()
    logger.info("Application shutdown")


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# Registered before CORS so the catch-all 500 responses also carry CORS headers
register_error_handlers(app)

# Origins allowed to call the API from a browser, the UI's dev server by default
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Instrument the app with Prometheus metrics
instrument_app(app)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
@log_request
async def read_root():
    return {"message": f"Welcome to the {settings.PROJECT_NAME}"}
