from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from database.mongodb import db
from config import get_settings
from routes import fleet, maintenance, components, flight_logs, notifications
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

settings = get_settings()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for the app"""
    # Startup
    await db.connect(settings.mongo_url, settings.db_name)
    await db.ensure_indexes()
    logger.info("FlightOps Backend started")
    yield
    # Shutdown
    await db.disconnect()
    logger.info("FlightOps Backend stopped")

# Create FastAPI app
app = FastAPI(
    title="FlightOps API",
    description="Fleet Maintenance Tracking and Flight Logs",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(fleet.router)
app.include_router(maintenance.router)
app.include_router(components.router)
app.include_router(flight_logs.router)
app.include_router(notifications.router)

@app.get("/")
async def root():
    return {
        "message": "FlightOps API",
        "version": "1.0.0",
        "status": "running"
    }

@app.get("/api")
async def api_root():
    return {
        "message": "FlightOps API",
        "endpoints": {
            "fleet": "/api/fleet",
            "maintenance": "/api/maintenance",
            "components": "/api/components",
            "flight_logs": "/api/flight-logs",
            "notifications": "/api/notifications"
        }
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy"}
