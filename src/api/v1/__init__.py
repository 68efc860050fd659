# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    activity: Recent activity feed, record details and classification.
"""

from fastapi import APIRouter

from src.api.v1 import activity

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(activity.router, prefix="/activity", tags=["Activity Feed"])

__all__ = ["router"]
