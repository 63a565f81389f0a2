"""
Audit API Router - v1.

Endpoints:
- /analyze - Gemini generateContent relay
- /audits - Gated, metered audit that stores a compliance report
- /reports - Report history per owner
"""

from fastapi import APIRouter

from smartbid.app.audit.api.v1.analyze import router as analyze_router
from smartbid.app.audit.api.v1.audits import router as audits_router
from smartbid.app.audit.api.v1.reports import router as reports_router

v1 = APIRouter(tags=['Audit'])

v1.include_router(analyze_router)
v1.include_router(audits_router)
v1.include_router(reports_router)

__all__ = ['v1']
