"""
Route Service Main Application

Read-only FastAPI surface over the Route Coordinator: active routes, the
campaigns still free to assign, and hub statistics.
Port: 8261
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.ledger_types import LedgerValidationError

from microservices.campaign_service.models import Campaign, CampaignListResponse

from .factory import RouteServiceFactory, close_factory, get_factory
from .models import HealthResponse, HubStats, Route, RouteListResponse
from .protocols import RouteNotFoundError
from .route_service import RouteService

settings = get_settings()
settings.logging.apply()
logger = logging.getLogger(__name__)

# Service configuration
SERVICE_NAME = "route_service"
SERVICE_PORT = settings.route_service_port
SERVICE_VERSION = "1.0.0"

# Global factory instance
factory: Optional[RouteServiceFactory] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    global factory

    logger.info(f"Starting {SERVICE_NAME} on port {SERVICE_PORT}")

    factory = await get_factory()

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")
    await close_factory()
    factory = None


# Create FastAPI application
app = FastAPI(
    title="Route Service",
    description="Shipping routes and campaign-to-route assignment pool",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


# ====================
# Exception Handlers
# ====================


@app.exception_handler(RouteNotFoundError)
async def route_not_found_handler(request: Request, exc: RouteNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.exception_handler(LedgerValidationError)
async def validation_error_handler(request: Request, exc: LedgerValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "field": exc.field},
    )


# ====================
# Dependencies
# ====================


def get_service() -> RouteService:
    """Get route service from factory"""
    if not factory:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return factory.service


# ====================
# Health Endpoints
# ====================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    dependencies = {}

    if factory:
        checker = getattr(factory.ledger, "health_check", None)
        if checker is None:
            dependencies["ledger_gateway"] = "not_configured"
        else:
            dependencies["ledger_gateway"] = "healthy" if await checker() else "unhealthy"

    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        port=SERVICE_PORT,
        version=SERVICE_VERSION,
        dependencies=dependencies,
    )


# ====================
# Route Endpoints
# ====================


@app.get("/api/v1/routes", response_model=RouteListResponse, tags=["Routes"])
async def list_routes(service: RouteService = Depends(get_service)):
    """Active routes; undecodable records are skipped"""
    routes = await service.list_active_routes()
    return RouteListResponse(routes=routes, total=len(routes))


@app.get(
    "/api/v1/routes/assignable-campaigns",
    response_model=CampaignListResponse,
    tags=["Routes"],
)
async def list_assignable_campaigns(service: RouteService = Depends(get_service)):
    """Funded or completed campaigns not yet assigned to any active route"""
    campaigns: List[Campaign] = await service.get_assignable_campaigns()
    return CampaignListResponse(campaigns=campaigns, total=len(campaigns))


@app.get("/api/v1/routes/stats", response_model=HubStats, tags=["Routes"])
async def hub_stats(service: RouteService = Depends(get_service)):
    return await service.get_hub_stats()


@app.get("/api/v1/routes/{route_id}", response_model=Route, tags=["Routes"])
async def get_route(route_id: str, service: RouteService = Depends(get_service)):
    """Get route by ID"""
    route = await service.get_route(route_id)
    if route is None:
        raise RouteNotFoundError(f"Route not found: {route_id}")
    return route


# ====================
# Main Entry Point
# ====================


def main():
    """Run the service"""
    import uvicorn

    uvicorn.run(
        "microservices.route_service.main:app",
        host="0.0.0.0",
        port=SERVICE_PORT,
        reload=settings.debug,
        log_level=settings.logging.log_level.lower(),
    )


if __name__ == "__main__":
    main()
