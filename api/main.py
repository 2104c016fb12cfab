"""
Cheerbase Billing API - Main Application.

FastAPI application with CORS enabled for frontend communication.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from services.settings import configure_logging, get_settings

settings = get_settings()
configure_logging(settings)

# Create FastAPI application
app = FastAPI(
    title="Cheerbase Billing API",
    description="Invoice numbering, division pricing and registration lock rules",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS from CHEERBASE_CORS_ORIGINS (all origins by default)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "cheerbase-billing-api"
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "Cheerbase Billing API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import invoices, pricing, registrations

app.include_router(invoices.router, prefix="/api/v1", tags=["Invoices"])
app.include_router(pricing.router, prefix="/api/v1", tags=["Pricing"])
app.include_router(registrations.router, prefix="/api/v1", tags=["Registrations"])
