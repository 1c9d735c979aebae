"""
Simple Bank: FastAPI Application.

This is the entry point for the application.
All routers are registered here.
"""

import logging

from fastapi import FastAPI

from simple_bank.config import get_settings
from simple_bank.api.health import router as health_router
from simple_bank.api.transfers import router as transfers_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Atomic money transfers between accounts",
)

# Register routers
app.include_router(health_router)
app.include_router(transfers_router)
