"""
OilDesk Server - Main FastAPI Application

This module contains the main FastAPI application for the OilDesk server.
It serves the administrative dashboard for oil, diesel and waste reports:
sign-in, user and access request management, and report endpoints.
"""

import logging
from logging.handlers import RotatingFileHandler
from datetime import datetime
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from managers.database_manager import DatabaseManager
from request_lifecycle import ReconcileApprovals

# Configure logging to write to both console and file
# Create logs directory if it doesn't exist
logs_dir = Path("logs")
logs_dir.mkdir(exist_ok=True)

# Create log filename with timestamp
log_filename = logs_dir / f"oildesk-server-{datetime.now().strftime('%Y-%m-%d')}.log"

# Configure logging with both console and file handlers
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        # Console handler
        logging.StreamHandler(),
        # File handler with rotation (max 10MB per file, keep 10 backup files)
        RotatingFileHandler(
            log_filename,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=10,
            encoding='utf-8'
        )
    ]
)
logger = logging.getLogger(__name__)

# Import database module for shared service instances
import database


# ==================== Lifespan Events ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler for startup and shutdown
    Manages database initialization and cleanup
    """
    # Startup
    logger.info("OilDesk Server starting up...")

    db_manager = DatabaseManager()

    # Initialize database (creates tables if needed, but won't recreate admin if exists)
    admin_credentials = db_manager.InitializeDatabase()
    if admin_credentials:
        email, password = admin_credentials
        logger.warning("=" * 60)
        logger.warning("NEW ADMIN USER CREATED")
        logger.warning(f"Email: {email}")
        logger.warning(f"Password: {password}")
        logger.warning("SAVE THIS PASSWORD - IT WILL NOT BE SHOWN AGAIN!")
        logger.warning("=" * 60)

    logger.info("Database initialized successfully")

    # Build the document store, identity provider and session tracker
    database.InitializeServices(db_manager)

    # Heal approvals whose user record was never written
    healed = ReconcileApprovals(database.document_store)
    if healed:
        logger.warning(f"Reconciled {healed} approved request(s) with missing users")

    logger.info("Server startup complete")

    yield

    # Shutdown
    logger.info("OilDesk Server shutting down...")
    logger.info("Shutdown complete")


# ==================== FastAPI Application ====================

app = FastAPI(
    title="OilDesk Server",
    description="Administrative dashboard for oil, diesel and waste reports",
    version="1.0.0",
    lifespan=lifespan
)

# ==================== CORS Middleware ====================

# Allow all origins for development
# In production, this should be restricted to specific client URLs
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== Import Routers ====================

from routes import status, auth, reports
from routes.admin import auth as admin_auth, users as admin_users, roles as admin_roles
from routes.admin import requests as admin_requests


# ==================== Include Routers ====================

# Include all route modules
app.include_router(status.router)
app.include_router(auth.router)
app.include_router(reports.router)

# Include admin route modules
app.include_router(admin_auth.router)
app.include_router(admin_users.router)
app.include_router(admin_roles.router)
app.include_router(admin_requests.router)


# ==================== Main Entry Point ====================

if __name__ == "__main__":
    """
    Run the server using uvicorn
    """
    logger.info("Starting OilDesk Server...")

    # Run server with uvicorn
    # host="0.0.0.0" allows connections from other machines on the network
    # reload=False: Auto-reload disabled to prevent spurious log messages from
    #               file monitoring. Manually restart server after code changes.
    uvicorn.run(
        "server:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
        log_level="info"
    )
