# steadylog backend api
# fastapi app with async mongodb: event log, medications, patient links, and insights

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from steadylog.config import settings
from steadylog.services.db import db
from steadylog.routers import events, medications, patients, profile, insights, session

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: connect to mongodb. shutdown: close connection."""
    logger.info("Starting SteadyLog backend...")
    await db.connect()
    logger.info("SteadyLog backend ready")
    yield
    logger.info("Shutting down SteadyLog backend...")
    await db.close()


app = FastAPI(
    title="SteadyLog API",
    description="Backend API for tracking behavioral events and medications, with caregiver and clinician insights",
    version="0.1.0",
    lifespan=lifespan,
)

# cors: allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# register routers
app.include_router(session.router)
app.include_router(events.router)
app.include_router(medications.router)
app.include_router(patients.router)
app.include_router(profile.router)
app.include_router(insights.router)


@app.get("/health")
async def health_check():
    """basic health check endpoint"""
    return {"status": "ok", "service": "steadylog-api"}
