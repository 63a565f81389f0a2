"""Compliance report history endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from smartbid.app.audit.api.deps import get_audit_service
from smartbid.app.audit.exceptions import AuditError
from smartbid.app.audit.schema.report import to_detail
from smartbid.app.audit.service.audit_service import AuditService

router = APIRouter(prefix='/reports')


@router.get('')
async def list_reports(
    owner_login: str = Query(..., alias='ownerLogin', min_length=1),
    service: AuditService = Depends(get_audit_service),
) -> list[dict]:
    reports = await service.list_reports(owner_login)
    return [to_detail(r).model_dump(by_alias=True, mode='json') for r in reports]


@router.delete('/{report_id}', status_code=204)
async def delete_report(
    report_id: str,
    owner_login: str = Query(..., alias='ownerLogin', min_length=1),
    service: AuditService = Depends(get_audit_service),
) -> Response:
    try:
        await service.delete_report(report_id, owner_login)
    except AuditError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(status_code=204)
