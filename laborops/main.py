### laborops/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
import logging

load_dotenv()

from laborops.core.config import settings
from laborops.core.errors import register_error_handlers
from laborops.db import create_db_and_tables
from laborops.api import labor_routes, scheduling_routes
import laborops.models  # registers all models via models/__init__.py
from sqlalchemy.orm import configure_mappers
configure_mappers()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

# Create the FastAPI app
app = FastAPI(title="LaborOps API", version="1.0.0")

register_error_handlers(app)

# Allow frontend dev (CORS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In prod, restrict this!
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup():
    log.info("Starting DB setup...")
    await create_db_and_tables()
    log.info("DB schema created.")


@app.get("/health")
async def health():
    return {"ok": True}


# Core app routers
app.include_router(scheduling_routes.router)
app.include_router(labor_routes.router)
