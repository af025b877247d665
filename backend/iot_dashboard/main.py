"""
IoT Dashboard - Backend API
===========================
FastAPI application serving the IoT monitoring admin dashboard.

ARCHITECTURE:
    The dashboard frontend talks to this API; this API talks to MongoDB.

    [Dashboard SPA] --HTTP/JSON--> [This Backend] --pymongo--> [MongoDB]
                                                               users
                                                               sensors
                                                               measures

RESOURCES:
    1. Users    - Households (location, persons in house, house size)
    2. Sensors  - Devices installed in a user's house
    3. Measures - Readings taken by a sensor

HOW TO RUN:
    # Install
    pip install -e .

    # Copy environment config
    cp env.example.txt .env
    # Edit .env with your settings

    # Run the server
    uvicorn iot_dashboard.main:app --reload --port 31356

    # or
    python -m iot_dashboard.main

API DOCUMENTATION:
    After starting the server, visit:
    - Swagger UI: http://localhost:31356/docs
    - ReDoc: http://localhost:31356/redoc
"""

import logging
import os
import sys
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from iot_dashboard.exceptions import DashboardError
from iot_dashboard.routers import (
    measures_router,
    sensors_router,
    set_services,
    users_router,
)
from iot_dashboard.services import MongoStore, build_services
from iot_dashboard.services.base_service import format_validation_error


# Load environment variables from .env file
load_dotenv()


# =============================================================================
# CONFIGURATION
# =============================================================================

def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """
    Application configuration loaded from environment variables.

    Environment Variables:
        DATABASE_URL: MongoDB connection URI
        DATABASE_NAME: Database holding users/sensors/measures
        PORT: Port to listen on when started as a script (default: 31356)
        FRONTEND_URL: URL of the frontend for CORS
        API_TOKEN: If set, write endpoints require "Authorization: Bearer <token>"
        STRICT_REFERENCES: If true, sensors/measures must reference existing documents
        LOG_LEVEL: Logging level (default: INFO)
    """

    DATABASE_URL = os.getenv("DATABASE_URL", "mongodb://localhost:27017")
    DATABASE_NAME = os.getenv("DATABASE_NAME", "iot_dashboard")

    PORT = int(os.getenv("PORT", "31356"))

    # Frontend URL for CORS
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

    API_TOKEN = os.getenv("API_TOKEN") or None

    STRICT_REFERENCES = _env_flag("STRICT_REFERENCES")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Allowed CORS origins
    CORS_ORIGINS = [
        FRONTEND_URL,
        "http://localhost:5173",    # Vite dev server
        "http://localhost:3000",    # Create React App
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]


logging.basicConfig(
    level=Config.LOG_LEVEL,
    format='[%(asctime)s] %(levelname)s %(name)s: %(message)s',
    datefmt='%H:%M:%S',
    handlers=[logging.StreamHandler(sys.stderr)]
)
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    STARTUP:
        1. Open the MongoDB client (connects lazily)
        2. Build the user/sensor/measure services
        3. Inject them into the routers

    SHUTDOWN:
        1. Detach the services from the routers
        2. Close the MongoDB client
    """
    # ========== STARTUP ==========
    print("=" * 60)
    print("IOT DASHBOARD - Starting Backend")
    print("=" * 60)

    store = MongoStore(Config.DATABASE_URL, Config.DATABASE_NAME)
    services = build_services(store.database, strict_references=Config.STRICT_REFERENCES)
    set_services(services, api_token=Config.API_TOKEN)
    app.state.store = store

    print(f"Database: {Config.DATABASE_NAME}")
    print(f"Strict references: {'on' if Config.STRICT_REFERENCES else 'off'}")
    print(f"Write token: {'required' if Config.API_TOKEN else 'not required'}")
    print(f"CORS origins: {len(Config.CORS_ORIGINS)} configured")
    print("=" * 60)

    yield  # Application runs here

    # ========== SHUTDOWN ==========
    print("Shutting down...")
    set_services(None)
    store.close()
    print("Shutdown complete")


# =============================================================================
# CREATE FASTAPI APPLICATION
# =============================================================================

app = FastAPI(
    title="IoT Dashboard API",
    description="""
## Overview

REST API behind the IoT monitoring admin dashboard.

| Resource | Path | Notes |
|----------|------|-------|
| **Users** | `/users` | houseSize derived from personsInHouse |
| **Sensors** | `/sensors` | belong to a user through `userId` |
| **Measures** | `/measures` | belong to a sensor through `sensorID`; filter at `/measures/filter` |

Errors are returned as `{"error": "<message>"}`.
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# ERROR HANDLERS
# =============================================================================
# Every failure leaves as {"error": "..."} with a matching status code.

@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # FastAPI would answer 422; this API promises 400 for bad input
    return JSONResponse(status_code=400, content={"error": format_validation_error(exc)})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

app.include_router(users_router)
app.include_router(sensors_router)
app.include_router(measures_router)


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

@app.get(
    "/",
    summary="API Information",
    description="Get basic API information and available endpoints."
)
async def root():
    return {
        "name": "IoT Dashboard API",
        "version": "1.0.0",
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json"
        },
        "endpoints": {
            "users": {
                "list": "GET /users",
                "get": "GET /users/{id}",
                "create": "POST /users",
                "update": "PUT /users/{id}",
                "delete": "DELETE /users/{id}"
            },
            "sensors": {
                "list": "GET /sensors",
                "get": "GET /sensors/{id}",
                "create": "POST /sensors",
                "update": "PUT /sensors/{id}",
                "delete": "DELETE /sensors/{id}"
            },
            "measures": {
                "list": "GET /measures",
                "filter": "GET /measures/filter?type&sensorID&startDate&endDate&minValue&maxValue",
                "get": "GET /measures/{id}",
                "create": "POST /measures",
                "update": "PUT /measures/{id}",
                "delete": "DELETE /measures/{id}"
            }
        }
    }


@app.get(
    "/health",
    summary="Health Check",
    description="Check if the backend is running and the database answers."
)
def health(request: Request):
    store = getattr(request.app.state, "store", None)
    database_ok = store is not None and store.ping()
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "connected" if database_ok else "unreachable",
        "strict_references": Config.STRICT_REFERENCES,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=Config.PORT)
