# /app/main.py

import logging

# --- Core FastAPI Imports ---
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .core.config import settings
from .db.base import Base
from .db.database import engine

# --- Application-specific Router Imports ---
from .routers import (
    classes_router,
    subjects_router,
    timetable_router,
    attendance_router,
    tasks_router,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Runs once on startup. Alembic owns schema changes in production;
    # create_all only fills in missing tables for a fresh local database.
    Base.metadata.create_all(bind=engine)
    logger.info("Attendance backend started")
    yield


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="Class Attendance Backend API",
    description="Timetable-driven attendance, elective rosters and assignments for a class.",
    version="1.0.0",
    lifespan=lifespan
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Router Inclusion ---
app.include_router(classes_router.router, prefix="/api/classes", tags=["Classes"])
app.include_router(subjects_router.router, prefix="/api/subjects", tags=["Subjects & Electives"])
app.include_router(timetable_router.router, prefix="/api/timetable", tags=["Timetable"])
app.include_router(attendance_router.router, prefix="/api/attendance", tags=["Attendance"])
app.include_router(tasks_router.router, prefix="/api/tasks", tags=["Tasks"])


# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Attendance backend is running!", "version": app.version}
