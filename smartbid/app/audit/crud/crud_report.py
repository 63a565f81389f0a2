"""Compliance report persistence."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from uuid import uuid4

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from smartbid.app.audit.schema.report import ComplianceReport

logger = logging.getLogger(__name__)

REPORTS_COLLECTION = 'compliance_reports'


def reports_collection_path(app_id: str) -> str:
    return f'artifacts/{app_id}/{REPORTS_COLLECTION}'


class ReportStore(ABC):
    """Create-once storage for compliance reports, queryable by owner."""

    @abstractmethod
    async def add(self, report: ComplianceReport) -> ComplianceReport:
        """Persist a new report and return it with its assigned id."""

    @abstractmethod
    async def get(self, report_id: str) -> Optional[ComplianceReport]:
        ...

    @abstractmethod
    async def list_by_owner(self, owner_login: str) -> List[ComplianceReport]:
        """Reports of one owner, newest first."""

    @abstractmethod
    async def delete(self, report_id: str) -> None:
        ...

    async def close(self) -> None:
        ...


class InMemoryReportStore(ReportStore):
    def __init__(self):
        self._reports: Dict[str, dict] = {}

    async def add(self, report: ComplianceReport) -> ComplianceReport:
        report_id = uuid4().hex
        self._reports[report_id] = report.to_document()
        return report.model_copy(update={'id': report_id})

    async def get(self, report_id: str) -> Optional[ComplianceReport]:
        data = self._reports.get(report_id)
        if data is None:
            return None
        return ComplianceReport.model_validate({**data, 'id': report_id})

    async def list_by_owner(self, owner_login: str) -> List[ComplianceReport]:
        reports = [
            ComplianceReport.model_validate({**data, 'id': report_id})
            for report_id, data in self._reports.items()
            if data.get('ownerLogin') == owner_login
        ]
        return sorted(reports, key=lambda r: r.timestamp, reverse=True)

    async def delete(self, report_id: str) -> None:
        self._reports.pop(report_id, None)


class FirestoreReportStore(ReportStore):
    """Reports in a single per-application collection (admins can read all of it)."""

    def __init__(self, client: firestore.AsyncClient, app_id: str):
        self._collection = client.collection(reports_collection_path(app_id))

    async def add(self, report: ComplianceReport) -> ComplianceReport:
        _, doc_ref = await self._collection.add(report.to_document())
        logger.info(f'[REPORTS] Saved report {doc_ref.id} for {report.owner_login}')
        return report.model_copy(update={'id': doc_ref.id})

    async def get(self, report_id: str) -> Optional[ComplianceReport]:
        snapshot = await self._collection.document(report_id).get()
        if not snapshot.exists:
            return None
        return ComplianceReport.model_validate({**snapshot.to_dict(), 'id': snapshot.id})

    async def list_by_owner(self, owner_login: str) -> List[ComplianceReport]:
        query = self._collection.where(filter=FieldFilter('ownerLogin', '==', owner_login))
        reports = [
            ComplianceReport.model_validate({**snapshot.to_dict(), 'id': snapshot.id})
            async for snapshot in query.stream()
        ]
        # Sorted here to avoid requiring a composite index
        return sorted(reports, key=lambda r: r.timestamp, reverse=True)

    async def delete(self, report_id: str) -> None:
        await self._collection.document(report_id).delete()
