"""
Golden Visa Eligibility Rule Engine

Five fixed questions are answered one at a time. Each residency pathway is a
declarative rule: a set of allowed answers per question, plus an optional
sub-predicate that marks the pathway as recommended. Rules are independent,
so a profile can match none, one or several pathways.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────
# Questions
# ─────────────────────────────────────────────

class QuestionOption(BaseModel):
    value: str
    label: str


class Question(BaseModel):
    id: str
    prompt: str
    options: List[QuestionOption]

    def accepts(self, value: str) -> bool:
        return any(o.value == value for o in self.options)


def _options(*pairs) -> List[QuestionOption]:
    return [QuestionOption(value=v, label=l) for v, l in pairs]


QUESTIONS: List[Question] = [
    Question(
        id="purpose",
        prompt="What is your primary reason for considering Dubai?",
        options=_options(
            ("business", "Start or expand a business"),
            ("investment", "Investment opportunities"),
            ("employment", "Career / Employment"),
            ("lifestyle", "Lifestyle & Tax benefits"),
            ("retirement", "Retirement"),
        ),
    ),
    Question(
        id="investment",
        prompt="What is your estimated investment capacity?",
        options=_options(
            ("under500k", "Under $500,000"),
            ("500k-1m", "$500,000 - $1 Million"),
            ("1m-2m", "$1 Million - $2 Million"),
            ("2m-5m", "$2 Million - $5 Million"),
            ("over5m", "Over $5 Million"),
        ),
    ),
    Question(
        id="profession",
        prompt="What best describes your professional background?",
        options=_options(
            ("executive", "C-Suite / Executive"),
            ("entrepreneur", "Business Owner / Entrepreneur"),
            ("specialist", "Specialist / Expert"),
            ("creative", "Creative / Artist"),
            ("scientist", "Scientist / Researcher"),
            ("other", "Other Professional"),
        ),
    ),
    Question(
        id="timeline",
        prompt="When are you planning to relocate?",
        options=_options(
            ("immediate", "Within 3 months"),
            ("soon", "3-6 months"),
            ("planning", "6-12 months"),
            ("exploring", "Just exploring options"),
        ),
    ),
    Question(
        id="family",
        prompt="Will you be relocating with family?",
        options=_options(
            ("solo", "Just myself"),
            ("spouse", "With spouse/partner"),
            ("family", "With spouse and children"),
            ("extended", "Extended family members"),
        ),
    ),
]

QUESTION_IDS = [q.id for q in QUESTIONS]


# ─────────────────────────────────────────────
# Answers + results
# ─────────────────────────────────────────────

class EligibilityAnswer(BaseModel):
    question_id: str
    value: str


class EligibilityPathway(BaseModel):
    name: str
    duration_label: str
    description: str
    requirements: List[str] = Field(default_factory=list)
    benefits: List[str] = Field(default_factory=list)
    processing_time_label: str
    is_recommended: bool = False


class EligibilityResult(BaseModel):
    is_eligible: bool = False
    pathways: List[EligibilityPathway] = Field(default_factory=list)
    next_steps: List[str] = Field(default_factory=list)


NEXT_STEPS = [
    "Book a consultation to discuss your specific situation",
    "Gather required documents (passport, proof of funds, etc.)",
    "Select the visa pathway that best matches your goals",
    "Begin the application process with our guidance",
]


ProfileInput = Union[Iterable[EligibilityAnswer], Mapping[str, Optional[str]]]


def answer_values(profile: ProfileInput) -> Dict[str, str]:
    """
    Flatten a profile to {question_id: value}.

    Accepts an ordered list of answers or a plain mapping. The first non-empty
    answer to a question is kept; empty values count as unanswered.
    """
    if isinstance(profile, Mapping):
        items = profile.items()
    else:
        items = ((a.question_id, a.value) for a in profile)
    values: Dict[str, str] = {}
    for qid, value in items:
        if value:
            values.setdefault(qid, value)
    return values


# ─────────────────────────────────────────────
# Rules
# ─────────────────────────────────────────────

Predicate = Mapping[str, FrozenSet[str]]


def _matches(predicate: Predicate, values: Mapping[str, str]) -> bool:
    """Every keyed question must be answered with one of its allowed values."""
    return all(values.get(qid) in allowed for qid, allowed in predicate.items())


@dataclass(frozen=True)
class PathwayRule:
    """required answers → pathway template"""
    key: str
    template: EligibilityPathway
    requires: Predicate
    # None = never recommended; {} = always recommended when the rule matches
    recommended_when: Optional[Predicate] = None

    def matches(self, values: Mapping[str, str]) -> bool:
        return _matches(self.requires, values)

    def is_recommended(self, values: Mapping[str, str]) -> bool:
        return self.recommended_when is not None and _matches(self.recommended_when, values)

    def instantiate(self, values: Mapping[str, str]) -> EligibilityPathway:
        return self.template.model_copy(
            update={"is_recommended": self.is_recommended(values)},
            deep=True,
        )


def _any_of(*values: str) -> FrozenSet[str]:
    return frozenset(values)


PATHWAY_RULES: List[PathwayRule] = [
    PathwayRule(
        key="property",
        requires={"investment": _any_of("1m-2m", "2m-5m", "over5m")},
        recommended_when={},
        template=EligibilityPathway(
            name="10-Year Golden Visa (Property)",
            duration_label="10 Years",
            description="Obtain residency through property investment of AED 2 million or more.",
            requirements=[
                "Property investment of AED 2,000,000+ (fully paid)",
                "Valid passport",
                "Health insurance",
                "No criminal record",
            ],
            benefits=[
                "10-year renewable residency",
                "Sponsor unlimited family members",
                "No minimum stay requirement",
                "Work for any employer or freelance",
                "Access to UAE banking & business",
            ],
            processing_time_label="2-4 weeks",
        ),
    ),
    PathwayRule(
        key="investor",
        requires={
            "purpose": _any_of("investment", "business"),
            "investment": _any_of("2m-5m", "over5m"),
        },
        recommended_when={"investment": _any_of("over5m")},
        template=EligibilityPathway(
            name="10-Year Golden Visa (Investor)",
            duration_label="10 Years",
            description="For investors with public investments or company shareholders.",
            requirements=[
                "Investment/deposit of AED 2,000,000+",
                "Or ownership of company with capital AED 2M+",
                "Valid passport",
                "Health insurance",
            ],
            benefits=[
                "10-year renewable residency",
                "Full business ownership rights",
                "Sponsor family members",
                "Multiple entry visa",
                "No sponsor required",
            ],
            processing_time_label="2-4 weeks",
        ),
    ),
    PathwayRule(
        key="entrepreneur",
        requires={
            "profession": _any_of("entrepreneur", "executive"),
            "purpose": _any_of("business"),
        },
        template=EligibilityPathway(
            name="10-Year Golden Visa (Entrepreneur)",
            duration_label="10 Years",
            description="For founders of successful startups or businesses.",
            requirements=[
                "Own a startup valued at AED 2M+",
                "Or have sold a startup for AED 7M+",
                "Approval from accredited business incubator",
                "Valid passport",
            ],
            benefits=[
                "10-year renewable residency",
                "Bring business partners & employees",
                "No local sponsor needed",
                "Full company ownership",
            ],
            processing_time_label="3-6 weeks",
        ),
    ),
    PathwayRule(
        key="talent",
        requires={"profession": _any_of("specialist", "scientist", "creative")},
        template=EligibilityPathway(
            name="10-Year Golden Visa (Exceptional Talent)",
            duration_label="10 Years",
            description="For specialists, scientists, and exceptional talents in their field.",
            requirements=[
                "PhD holders or specialists in priority fields",
                "Scientists with significant research contributions",
                "Creative professionals with awards/recognition",
                "Letter of recommendation from relevant authority",
            ],
            benefits=[
                "10-year renewable residency",
                "Work independently or for any employer",
                "Sponsor family members",
                "Fast-track processing available",
            ],
            processing_time_label="2-4 weeks",
        ),
    ),
    PathwayRule(
        key="executive",
        requires={
            "profession": _any_of("executive"),
            "purpose": _any_of("employment"),
        },
        template=EligibilityPathway(
            name="10-Year Golden Visa (Executive)",
            duration_label="10 Years",
            description="For senior executives of established companies.",
            requirements=[
                "Executive director or senior manager position",
                "Minimum salary of AED 30,000/month",
                "Bachelor's degree or equivalent",
                "Valid employment contract in UAE",
            ],
            benefits=[
                "10-year renewable residency",
                "Change employers without visa change",
                "Sponsor family members",
                "No minimum stay",
            ],
            processing_time_label="2-4 weeks",
        ),
    ),
    PathwayRule(
        key="freelance",
        requires={"investment": _any_of("under500k", "500k-1m")},
        template=EligibilityPathway(
            name="Freelance Visa",
            duration_label="1-3 Years",
            description="Self-sponsored visa for freelancers and independent professionals.",
            requirements=[
                "Proof of professional expertise",
                "Minimum AED 20,000 bank balance",
                "Health insurance",
                "No degree requirement for some categories",
            ],
            benefits=[
                "Self-sponsored residency",
                "Work with multiple clients",
                "Issue your own invoices",
                "Open UAE bank account",
            ],
            processing_time_label="1-2 weeks",
        ),
    ),
    PathwayRule(
        key="company_formation",
        requires={"investment": _any_of("under500k", "500k-1m")},
        template=EligibilityPathway(
            name="Company Formation Visa",
            duration_label="2-3 Years",
            description="Residency through setting up a Free Zone or Mainland company.",
            requirements=[
                "Company setup (from AED 15,000)",
                "Office space (flexi-desk acceptable)",
                "Valid passport",
                "Health insurance",
            ],
            benefits=[
                "Self-sponsored residency",
                "100% business ownership",
                "Sponsor employees & family",
                "Business-friendly regulations",
            ],
            processing_time_label="1-3 weeks",
        ),
    ),
]


# ─────────────────────────────────────────────
# Evaluation
# ─────────────────────────────────────────────

def recommended_first(pathways: List[EligibilityPathway]) -> List[EligibilityPathway]:
    """Stable partition: recommended pathways first, original order kept in both groups."""
    return (
        [p for p in pathways if p.is_recommended]
        + [p for p in pathways if not p.is_recommended]
    )


def evaluate(profile: ProfileInput, rules: Optional[List[PathwayRule]] = None) -> EligibilityResult:
    """
    Match a profile against every pathway rule.

    Partial or empty profiles are valid input and simply match fewer rules.
    """
    values = answer_values(profile)
    rules = PATHWAY_RULES if rules is None else rules

    matched = [rule.instantiate(values) for rule in rules if rule.matches(values)]
    pathways = recommended_first(matched)

    logger.debug(
        "evaluate answers=%s matched=%s",
        sorted(values), [p.name for p in pathways],
    )

    return EligibilityResult(
        is_eligible=len(pathways) > 0,
        pathways=pathways,
        next_steps=list(NEXT_STEPS),
    )


# ─────────────────────────────────────────────
# Interactive session
# ─────────────────────────────────────────────

class SessionState(str, Enum):
    COLLECTING = "collecting"
    SHOWING_RESULT = "showing_result"


@dataclass
class EligibilitySession:
    """
    One visitor's walk through the questionnaire.

    The answers list always has one entry per completed step, so `step` is
    derived from it.
    """
    answers: List[EligibilityAnswer] = field(default_factory=list)
    result: Optional[EligibilityResult] = None

    @property
    def state(self) -> SessionState:
        return SessionState.SHOWING_RESULT if self.result is not None else SessionState.COLLECTING

    @property
    def step(self) -> int:
        return min(len(self.answers), len(QUESTIONS) - 1)

    @property
    def current_question(self) -> Optional[Question]:
        if self.state is SessionState.SHOWING_RESULT:
            return None
        return QUESTIONS[self.step]

    @property
    def progress(self) -> float:
        return (self.step + 1) / len(QUESTIONS) * 100

    def answer(self, value: str) -> "EligibilitySession":
        """Record an answer for the current question; the last one triggers evaluation."""
        if self.state is SessionState.SHOWING_RESULT:
            return self
        question = QUESTIONS[self.step]
        if not question.accepts(value):
            logger.info("Unlisted answer %r for question %s", value, question.id)
        self.answers.append(EligibilityAnswer(question_id=question.id, value=value))
        if len(self.answers) == len(QUESTIONS):
            self.result = evaluate(self.answers)
        return self

    def back(self) -> "EligibilitySession":
        if self.result is not None:
            # Return to the last question with its answer cleared
            self.result = None
            self.answers.pop()
        elif self.answers:
            self.answers.pop()
        return self

    def restart(self) -> "EligibilitySession":
        self.answers = []
        self.result = None
        return self

    # ── Serialisation (signed-cookie transport) ──

    def to_dict(self) -> Dict[str, object]:
        return {"answers": [[a.question_id, a.value] for a in self.answers]}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, object]]) -> "EligibilitySession":
        """Rebuild a session. Anything malformed yields a fresh session."""
        session = cls()
        if not isinstance(data, Mapping):
            return session
        raw = data.get("answers") or []
        if not isinstance(raw, list):
            return session
        for item in raw[:len(QUESTIONS)]:
            if not (isinstance(item, (list, tuple)) and len(item) == 2):
                return cls()
            session.answer(str(item[1]))
        return session

    def snapshot(self) -> Dict[str, object]:
        """View used by the HTTP layer."""
        question = self.current_question
        return {
            "state": self.state.value,
            "step": self.step,
            "total_steps": len(QUESTIONS),
            "progress": self.progress,
            "question": question.model_dump() if question else None,
            "answers": [a.model_dump() for a in self.answers],
            "result": self.result.model_dump() if self.result else None,
        }
