"""Metered audit endpoint."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from smartbid.app.audit.api.deps import get_audit_service
from smartbid.app.audit.exceptions import AuditError
from smartbid.app.audit.schema.report import to_detail
from smartbid.app.audit.service.audit_service import AuditService
from smartbid.src.billing.shared.config import CounterKey
from smartbid.src.billing.shared.exceptions import BillingError

router = APIRouter()


class RunAuditRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str = Field(min_length=1)
    owner_login: str = Field(min_length=1)
    counter_key: CounterKey = CounterKey.BIDDER
    contents: list[Any]
    system_instruction: Optional[dict[str, Any]] = None
    generation_config: Optional[dict[str, Any]] = None

    def relay_body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, include={'contents', 'system_instruction', 'generation_config'})


@router.post('/audits', status_code=201)
async def run_audit(
    request: RunAuditRequest,
    service: AuditService = Depends(get_audit_service),
) -> dict:
    """Gate, run and record one compliance audit."""
    try:
        result = await service.run_audit(
            user_id=request.user_id,
            owner_login=request.owner_login,
            counter_key=request.counter_key,
            body=request.relay_body(),
        )
    except (BillingError, AuditError) as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return {
        'report': to_detail(result.report).model_dump(by_alias=True, mode='json'),
        'usage': service.usage.summarize(result.usage),
    }
