"""Providers for the audit services held on app.state."""

from fastapi import Depends, HTTPException, Request

from smartbid.app.audit.crud.crud_report import ReportStore
from smartbid.app.audit.service.audit_service import AuditService
from smartbid.app.audit.service.llm_service import GeminiClient
from smartbid.src.billing.endpoints.dependencies import get_usage_service
from smartbid.src.billing.usage import UsageService


def get_llm_client(request: Request) -> GeminiClient:
    return request.app.state.llm_client


def get_report_store(request: Request) -> ReportStore:
    store = getattr(request.app.state, 'report_store', None)
    if store is None:
        raise HTTPException(status_code=500, detail="Document store not configured")
    return store


def get_audit_service(
    llm: GeminiClient = Depends(get_llm_client),
    reports: ReportStore = Depends(get_report_store),
    usage: UsageService = Depends(get_usage_service),
) -> AuditService:
    return AuditService(llm, reports, usage)
