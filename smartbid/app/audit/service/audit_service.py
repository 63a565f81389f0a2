"""Audit orchestration: gate, relay, persist, count."""

import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, List

from pydantic import ValidationError

from smartbid.app.audit.crud.crud_report import ReportStore
from smartbid.app.audit.exceptions import ReportAccessError, ReportNotFoundError, ReportParseError
from smartbid.app.audit.schema.report import ComplianceReport, ReportContent
from smartbid.app.audit.service.llm_service import GeminiClient
from smartbid.src.billing.domain.usage_record import UsageRecord
from smartbid.src.billing.shared.config import CounterKey
from smartbid.src.billing.shared.exceptions import UsageConflictError
from smartbid.src.billing.usage.service import UsageService

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r'```(?:json)?\s*(.*?)\s*```', re.S)


@dataclass
class AuditResult:
    report: ComplianceReport
    usage: UsageRecord


def extract_report_content(response: dict[str, Any]) -> ReportContent:
    """Parse the first candidate's text of a generateContent response.

    Raises:
        ReportParseError: If there is no text or it is not a valid report
    """
    try:
        text = ''.join(
            part.get('text', '')
            for part in response['candidates'][0]['content']['parts']
        )
    except (KeyError, IndexError, TypeError, AttributeError):
        raise ReportParseError('Model response has no candidate text')

    match = _FENCE_RE.search(text)
    candidate = match.group(1) if match else text.strip()
    try:
        return ReportContent.model_validate(json.loads(candidate))
    except (ValueError, ValidationError) as e:
        logger.warning(f'[AUDIT] Unparsable model output: {str(e)[:200]}')
        raise ReportParseError(f'Model output is not a valid compliance report: {str(e)[:200]}')


class AuditService:
    def __init__(self, llm: GeminiClient, reports: ReportStore, usage: UsageService):
        self.llm = llm
        self.reports = reports
        self.usage = usage

    async def run_audit(
        self,
        *,
        user_id: str,
        owner_login: str,
        counter_key: CounterKey,
        body: dict[str, Any],
    ) -> AuditResult:
        """Run one metered audit.

        Order: gate check, LLM call, report save, counter increment. Nothing is
        counted when the gate blocks or the LLM/parse step fails. If the
        increment aborts, the saved report is deleted before the
        UsageConflictError propagates.
        """
        await self.usage.ensure_allowed(user_id, counter_key)

        response = await self.llm.generate_content(body)
        content = extract_report_content(response)

        report = await self.reports.add(ComplianceReport(
            owner_login=owner_login,
            timestamp=int(time.time() * 1000),
            executive_summary=content.executive_summary,
            findings=content.findings,
        ))
        try:
            usage = await self.usage.increment_usage(user_id, counter_key)
        except UsageConflictError:
            # Uncounted audits must not leave a report behind
            await self.reports.delete(report.id)
            logger.warning(f'[AUDIT] Usage conflict for {user_id}; discarded report {report.id}')
            raise

        logger.info(f'[AUDIT] Report {report.id} for {owner_login}; {counter_key.value}={usage.get_counter(counter_key)}')
        return AuditResult(report=report, usage=usage)

    async def list_reports(self, owner_login: str) -> List[ComplianceReport]:
        return await self.reports.list_by_owner(owner_login)

    async def delete_report(self, report_id: str, owner_login: str) -> None:
        report = await self.reports.get(report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        if report.owner_login != owner_login:
            raise ReportAccessError(report_id)
        await self.reports.delete(report_id)
        logger.info(f'[AUDIT] Deleted report {report_id} of {owner_login}')
