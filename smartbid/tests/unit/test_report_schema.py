"""Unit tests for compliance report schemas."""

import pytest
from pydantic import ValidationError

from smartbid.app.audit.schema.report import (
    ComplianceCategory,
    ComplianceFlag,
    ComplianceReport,
    Finding,
    ReportContent,
    compliance_percentage,
    to_detail,
)
from smartbid.tests.factories import report_json


def finding(score, flag, stance='Push back on this clause.', **extra):
    return {
        'requirementText': 'Requirement',
        'complianceScore': score,
        'bidResponseSummary': 'Summary',
        'flag': flag,
        'negotiationStance': stance,
        **extra,
    }


class TestFinding:

    def test_accepts_model_field_name_for_requirement(self):
        parsed = Finding.model_validate(report_json()['findings'][0])

        assert parsed.requirement_text == 'ISO 9001 certification'
        assert parsed.category == ComplianceCategory.TECHNICAL
        assert parsed.model_dump(by_alias=True)['requirementText'] == 'ISO 9001 certification'

    @pytest.mark.parametrize('score', [0.25, 2, -1])
    def test_score_must_be_ternary(self, score):
        with pytest.raises(ValidationError):
            Finding.model_validate(finding(score, 'PARTIAL'))

    def test_flag_must_match_score(self):
        with pytest.raises(ValidationError):
            Finding.model_validate(finding(0, 'PARTIAL'))

    def test_stance_required_below_full_score(self):
        with pytest.raises(ValidationError):
            Finding.model_validate(finding(0.5, 'PARTIAL', stance=''))
        with pytest.raises(ValidationError):
            Finding.model_validate(finding(0, 'NON-COMPLIANT', stance=None))

    def test_compliant_finding_drops_stance(self):
        parsed = Finding.model_validate(finding(1, 'COMPLIANT', stance='n/a'))

        assert parsed.flag == ComplianceFlag.COMPLIANT
        assert parsed.negotiation_stance is None

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            Finding.model_validate(finding(0, 'NON-COMPLIANT', category='MARKETING'))


class TestCompliancePercentage:

    def test_unweighted_mean(self):
        content = ReportContent.model_validate(report_json([
            finding(1, 'COMPLIANT'),
            finding(0.5, 'PARTIAL'),
            finding(0, 'NON-COMPLIANT'),
        ]))

        assert compliance_percentage(content) == 50.0

    def test_rounds_to_one_decimal(self):
        content = ReportContent.model_validate(report_json([
            finding(1, 'COMPLIANT'),
            finding(0, 'NON-COMPLIANT'),
            finding(0, 'NON-COMPLIANT'),
        ]))

        assert compliance_percentage(content) == 33.3

    def test_no_findings(self):
        assert compliance_percentage(ReportContent(executive_summary='Empty')) == 0.0


class TestComplianceReport:

    def test_document_shape(self):
        report = ComplianceReport(
            id='r1',
            owner_login='alice',
            timestamp=1700000000000,
            **ReportContent.model_validate(report_json()).model_dump(),
        )

        doc = report.to_document()

        assert 'id' not in doc
        assert doc['ownerLogin'] == 'alice'
        assert doc['executiveSummary'] == 'Bid covers most mandatory requirements.'
        assert doc['findings'][1]['requirementText'] == 'Net-30 payment terms'
        assert doc['findings'][1]['flag'] == 'PARTIAL'

    def test_stored_document_round_trips(self):
        report = ComplianceReport(
            owner_login='alice',
            timestamp=1,
            **ReportContent.model_validate(report_json()).model_dump(),
        )

        restored = ComplianceReport.model_validate({**report.to_document(), 'id': 'r1'})

        assert restored.id == 'r1'
        assert restored.findings == report.findings

    def test_detail_adds_percentage(self):
        report = ComplianceReport(
            id='r1',
            owner_login='alice',
            timestamp=1,
            **ReportContent.model_validate(report_json()).model_dump(),
        )

        detail = to_detail(report).model_dump(by_alias=True, mode='json')

        assert detail['compliancePercentage'] == 75.0
        assert detail['id'] == 'r1'
