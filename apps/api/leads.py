"""
Consultation lead capture

Validates a consultation request and acknowledges it. Submissions are logged,
never stored.
"""

import logging
import secrets
from typing import List, Literal, Optional, get_args

from pydantic import BaseModel, EmailStr, Field, field_validator

logger = logging.getLogger(__name__)

RelocationProfile = Literal["Family", "Business", "Investor", "Executive"]
ServiceType = Literal["Residency", "Property", "Banking", "Education", "Tax Strategy", "Corporate"]
Jurisdiction = Literal["United Kingdom", "Europe", "North America", "Asia Pacific", "Other"]
InvestmentBracket = Literal["< £500k", "£500k - £2M", "£2M - £10M", "£10M+"]
Timeline = Literal["Immediate", "3 Months", "6 Months", "Planning"]

PROFILES = list(get_args(RelocationProfile))
SERVICES = list(get_args(ServiceType))
JURISDICTIONS = list(get_args(Jurisdiction))
INVESTMENT_BRACKETS = list(get_args(InvestmentBracket))
TIMELINES = list(get_args(Timeline))

THANK_YOU_PATH = "thank-you/consultation"


class LeadSubmission(BaseModel):
    profile: RelocationProfile
    services: List[ServiceType] = Field(default_factory=list)
    investment_bracket: InvestmentBracket = "£2M - £10M"
    timeline: Timeline = "Immediate"
    jurisdiction: Jurisdiction
    name: str = Field(..., max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=40)
    notes: Optional[str] = Field(default=None, max_length=4000)

    @field_validator("services")
    @classmethod
    def _dedupe_services(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(v))

    @field_validator("name")
    @classmethod
    def _name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v

    @field_validator("phone", "notes")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class LeadAcknowledgement(BaseModel):
    ok: bool = True
    reference: str
    redirect: str = THANK_YOU_PATH


def _masked_email(email: str) -> str:
    _, _, domain = email.partition("@")
    return f"***@{domain}"


def acknowledge(lead: LeadSubmission) -> LeadAcknowledgement:
    reference = secrets.token_hex(4).upper()
    logger.info(
        "Consultation request %s: profile=%s services=%s jurisdiction=%s email=%s",
        reference, lead.profile, ",".join(lead.services) or "-",
        lead.jurisdiction, _masked_email(lead.email),
    )
    return LeadAcknowledgement(reference=reference)
