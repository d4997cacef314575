"""
Campaign Service Main Application

Read-only FastAPI surface over the Campaign Coordinator. Writes need the
caller's signing capability and are not exposed over HTTP.
Port: 8260
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.ledger_types import LedgerValidationError

from .campaign_service import CampaignService
from .factory import CampaignServiceFactory, close_factory, get_factory
from .models import (
    Campaign,
    CampaignListResponse,
    CampaignStatus,
    ContainerRequirements,
    HealthResponse,
    JoinQuote,
    campaigns_created_by,
)
from .protocols import CampaignNotFoundError

settings = get_settings()
settings.logging.apply()
logger = logging.getLogger(__name__)

# Service configuration
SERVICE_NAME = "campaign_service"
SERVICE_PORT = settings.campaign_service_port
SERVICE_VERSION = "1.0.0"

# Global factory instance
factory: Optional[CampaignServiceFactory] = None


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
    title="Campaign Service",
    description="Group-purchasing and container campaigns decoded from the ledger",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


# ====================
# Exception Handlers
# ====================


@app.exception_handler(CampaignNotFoundError)
async def campaign_not_found_handler(request: Request, exc: CampaignNotFoundError):
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


def get_service() -> CampaignService:
    """Get campaign service from factory"""
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
# Campaign Endpoints
# ====================


@app.get(
    "/api/v1/campaigns",
    response_model=CampaignListResponse,
    tags=["Campaigns"],
)
async def list_campaigns(
    creator: Optional[str] = Query(None, description="Only campaigns created by this address"),
    status_filter: Optional[str] = Query(
        None, alias="status", description="Filter by status name (comma-separated)"
    ),
    joinable: Optional[bool] = Query(None, description="Only campaigns currently accepting joins"),
    service: CampaignService = Depends(get_service),
):
    """
    List campaigns

    Recomputed from the ledger on every call; undecodable records are skipped.
    """
    campaigns: List[Campaign] = await service.list_campaigns()

    if creator:
        campaigns = campaigns_created_by(campaigns, creator)
    if status_filter:
        try:
            wanted = {CampaignStatus[s.strip().upper()] for s in status_filter.split(",") if s.strip()}
        except KeyError as e:
            raise LedgerValidationError(f"Unknown campaign status: {e.args[0]}", field="status")
        campaigns = [c for c in campaigns if c.status in wanted]
    if joinable is not None:
        campaigns = [c for c in campaigns if c.is_joinable == joinable]

    return CampaignListResponse(campaigns=campaigns, total=len(campaigns))


@app.get(
    "/api/v1/campaigns/{campaign_id}",
    response_model=Campaign,
    tags=["Campaigns"],
)
async def get_campaign(
    campaign_id: str,
    service: CampaignService = Depends(get_service),
):
    """Get campaign by ID"""
    campaign = await service.get_campaign(campaign_id)
    if campaign is None:
        raise CampaignNotFoundError(f"Campaign not found: {campaign_id}")
    return campaign


@app.get(
    "/api/v1/campaigns/{campaign_id}/requirements",
    response_model=ContainerRequirements,
    tags=["Campaigns"],
)
async def get_container_requirements(
    campaign_id: str,
    service: CampaignService = Depends(get_service),
):
    """Container requirements of a container campaign"""
    requirements = await service.get_container_requirements(campaign_id)
    if requirements is None:
        raise CampaignNotFoundError(f"Container requirements not found: {campaign_id}")
    return requirements


@app.get(
    "/api/v1/campaigns/{campaign_id}/quote",
    response_model=JoinQuote,
    tags=["Campaigns"],
)
async def quote_join(
    campaign_id: str,
    weight_kg: Optional[int] = Query(None, description="Container campaigns: weight to reserve"),
    quantity: Optional[int] = Query(None, description="Product campaigns: units to buy"),
    service: CampaignService = Depends(get_service),
):
    """Payment a participant would make to join"""
    if (weight_kg is None) == (quantity is None):
        raise LedgerValidationError("Provide exactly one of weight_kg or quantity", field="weight_kg")
    if weight_kg is not None and weight_kg < 1:
        raise LedgerValidationError("weight_kg must be a positive integer", field="weight_kg")
    if quantity is not None and quantity < 1:
        raise LedgerValidationError("quantity must be a positive integer", field="quantity")

    if weight_kg is not None:
        quote = await service.quote_container_join(campaign_id, weight_kg)
    else:
        quote = await service.quote_product_join(campaign_id, quantity)
    if quote is None:
        raise CampaignNotFoundError(f"No quote available for campaign: {campaign_id}")
    return quote


# ====================
# Main Entry Point
# ====================


def main():
    """Run the service"""
    import uvicorn

    uvicorn.run(
        "microservices.campaign_service.main:app",
        host="0.0.0.0",
        port=SERVICE_PORT,
        reload=settings.debug,
        log_level=settings.logging.log_level.lower(),
    )


if __name__ == "__main__":
    main()
