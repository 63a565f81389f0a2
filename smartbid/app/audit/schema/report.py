"""Compliance report schemas."""

from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ComplianceFlag(str, Enum):
    COMPLIANT = 'COMPLIANT'
    PARTIAL = 'PARTIAL'
    NON_COMPLIANT = 'NON-COMPLIANT'


class ComplianceCategory(str, Enum):
    LEGAL = 'LEGAL'
    FINANCIAL = 'FINANCIAL'
    TECHNICAL = 'TECHNICAL'
    TIMELINE = 'TIMELINE'
    REPORTING = 'REPORTING'
    ADMINISTRATIVE = 'ADMINISTRATIVE'
    OTHER = 'OTHER'


# Score -> flag the model is instructed to emit
SCORE_FLAGS: dict[float, ComplianceFlag] = {
    1.0: ComplianceFlag.COMPLIANT,
    0.5: ComplianceFlag.PARTIAL,
    0.0: ComplianceFlag.NON_COMPLIANT,
}


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Finding(CamelModel):
    """One RFQ requirement and how the bid answers it."""

    requirement_text: str = Field(
        validation_alias=AliasChoices('requirementText', 'requirementFromRFQ', 'requirement_text'),
        serialization_alias='requirementText',
    )
    compliance_score: float
    bid_response_summary: str
    flag: ComplianceFlag
    category: ComplianceCategory = ComplianceCategory.OTHER
    negotiation_stance: Optional[str] = None

    @field_validator('compliance_score')
    @classmethod
    def check_score(cls, value: float) -> float:
        if value not in SCORE_FLAGS:
            raise ValueError('complianceScore must be 0, 0.5 or 1')
        return float(value)

    @model_validator(mode='after')
    def check_consistency(self) -> 'Finding':
        expected = SCORE_FLAGS[self.compliance_score]
        if self.flag != expected:
            raise ValueError(f'flag {self.flag.value} does not match score {self.compliance_score}')
        if self.compliance_score == 1.0:
            # Compliant findings carry no negotiation stance
            self.negotiation_stance = None
        elif not (self.negotiation_stance or '').strip():
            raise ValueError('negotiationStance is required when complianceScore < 1')
        return self


class ReportContent(CamelModel):
    """The part of a report produced by the model."""

    executive_summary: str
    findings: list[Finding] = Field(default_factory=list)


class ComplianceReport(ReportContent):
    """A stored audit result, owned by one user."""

    id: Optional[str] = None
    owner_login: str
    timestamp: int = Field(description='Creation time, ms since epoch')

    def to_document(self) -> dict:
        """Stored shape: camelCase, without the store-assigned id."""
        return self.model_dump(by_alias=True, exclude={'id'}, mode='json')


class ComplianceReportDetail(ComplianceReport):
    compliance_percentage: float


def compliance_percentage(report: ReportContent) -> float:
    """Unweighted share of the maximum score, in percent (one decimal)."""
    if not report.findings:
        return 0.0
    total = sum(f.compliance_score for f in report.findings)
    return round(total / len(report.findings) * 100, 1)


def to_detail(report: ComplianceReport) -> ComplianceReportDetail:
    return ComplianceReportDetail(
        **report.model_dump(),
        compliance_percentage=compliance_percentage(report),
    )
