import os
import logging
from typing import List, Optional, Dict, Any, Union

from dotenv import load_dotenv
from fastapi import FastAPI, Response, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
from pydantic import BaseModel, Field

from tax_engine import TaxEngine, TaxQuery, TaxResult, INCOME_PRESETS, format_amount
from eligibility import (
    QUESTIONS,
    EligibilityAnswer,
    EligibilityResult,
    EligibilitySession,
    evaluate,
)
from free_zones import (
    FREE_ZONES,
    ZONES_BY_ID,
    INDUSTRY_FILTERS,
    ALL_INDUSTRIES,
    MAX_COMPARE,
    BudgetTier,
    SortKey,
    ComparisonTable,
    filter_and_sort,
    toggle_selection,
    compare,
)
from leads import (
    LeadSubmission,
    LeadAcknowledgement,
    PROFILES,
    SERVICES,
    JURISDICTIONS,
    INVESTMENT_BRACKETS,
    TIMELINES,
    acknowledge,
)

load_dotenv()

APP_VERSION = "1.0.0"

SESSION_SECRET = os.getenv("SESSION_SECRET", "dev_secret_change_me")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").strip().lower() in {"1", "true", "yes"}
SESSION_MAX_AGE_SECONDS = int(os.getenv("SESSION_MAX_AGE_SECONDS", str(60 * 60 * 8)))  # 8 hours
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

serializer = URLSafeTimedSerializer(SESSION_SECRET)
ELIGIBILITY_COOKIE = "eligibility_session"
COMPARE_COOKIE = "compare_selection"

TAX_ENGINE = TaxEngine()

app = FastAPI(title="Relocation Concierge API", version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----------------------------
# Models
# ----------------------------
class TaxSavingsIn(BaseModel):
    jurisdiction: str = "uk"
    annual_income: Any = 0


class TaxSavingsOut(BaseModel):
    result: TaxResult
    formatted: Dict[str, str]
    destination: str = "United Arab Emirates"


class EligibilityIn(BaseModel):
    answers: Union[List[EligibilityAnswer], Dict[str, Optional[str]]] = Field(default_factory=list)


class SessionAnswerIn(BaseModel):
    value: str


class CompareToggleIn(BaseModel):
    zone_id: str


class CompareOut(BaseModel):
    selected: List[str]
    max_compare: int = MAX_COMPARE
    table: ComparisonTable


# ----------------------------
# Signed cookie helpers
# ----------------------------
def _read_cookie(request: Request, key: str) -> Optional[Any]:
    token = request.cookies.get(key)
    if not token:
        return None
    try:
        return serializer.loads(token, salt=key, max_age=SESSION_MAX_AGE_SECONDS)
    except SignatureExpired:
        logger.info("Expired %s cookie discarded", key)
    except BadSignature:
        logger.warning("Invalid %s cookie discarded", key)
    return None


def _write_cookie(response: Response, key: str, data: Any) -> None:
    response.set_cookie(
        key=key,
        value=serializer.dumps(data, salt=key),
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
        max_age=SESSION_MAX_AGE_SECONDS,
        path="/",
    )


def _load_session(request: Request) -> EligibilitySession:
    return EligibilitySession.from_dict(_read_cookie(request, ELIGIBILITY_COOKIE))


def _save_session(response: Response, session: EligibilitySession) -> Dict[str, Any]:
    _write_cookie(response, ELIGIBILITY_COOKIE, session.to_dict())
    return session.snapshot()


def _load_selection(request: Request) -> List[str]:
    data = _read_cookie(request, COMPARE_COOKIE)
    if not isinstance(data, list):
        return []
    # Drop anything that is no longer a known zone
    ids = [i for i in data if isinstance(i, str) and i in ZONES_BY_ID]
    return ids[:MAX_COMPARE]


# ----------------------------
# Health
# ----------------------------
@app.get("/api/v1/health")
def health():
    return {"ok": True, "version": APP_VERSION}


# ----------------------------
# Tax savings routes
# ----------------------------
@app.get("/api/v1/tax/jurisdictions")
def tax_jurisdictions():
    return {
        "items": TAX_ENGINE.get_supported_jurisdictions(),
        "income_presets": INCOME_PRESETS,
    }


@app.post("/api/v1/tax/savings", response_model=TaxSavingsOut)
def tax_savings(body: TaxSavingsIn):
    result = TAX_ENGINE.calculate(TaxQuery(jurisdiction=body.jurisdiction, annual_income=body.annual_income))
    symbol = result.currency_symbol
    formatted = {
        "annual_income": format_amount(result.annual_income, symbol),
        "income_usd": format_amount(result.income_usd, "$"),
        "current_tax": format_amount(result.current_tax, symbol),
        "destination_tax": format_amount(result.destination_tax, symbol),
        "effective_rate": f"{result.effective_rate:.1f}%",
        "annual_savings": format_amount(result.annual_savings, symbol),
        "five_year_savings": format_amount(result.five_year_savings, symbol),
        "ten_year_savings": format_amount(result.ten_year_savings, symbol),
    }
    return TaxSavingsOut(result=result, formatted=formatted)


# ----------------------------
# Eligibility routes
# ----------------------------
@app.get("/api/v1/eligibility/questions")
def eligibility_questions():
    return {"items": [q.model_dump() for q in QUESTIONS]}


@app.post("/api/v1/eligibility/evaluate", response_model=EligibilityResult)
def eligibility_evaluate(body: EligibilityIn):
    return evaluate(body.answers)


@app.get("/api/v1/eligibility/session")
def eligibility_session(request: Request, response: Response):
    return _save_session(response, _load_session(request))


@app.post("/api/v1/eligibility/session/answer")
def eligibility_session_answer(body: SessionAnswerIn, request: Request, response: Response):
    session = _load_session(request)
    session.answer(body.value)
    return _save_session(response, session)


@app.post("/api/v1/eligibility/session/back")
def eligibility_session_back(request: Request, response: Response):
    session = _load_session(request)
    session.back()
    return _save_session(response, session)


@app.post("/api/v1/eligibility/session/restart")
def eligibility_session_restart(request: Request, response: Response):
    session = _load_session(request)
    session.restart()
    return _save_session(response, session)


# ----------------------------
# Free zone routes
# ----------------------------
@app.get("/api/v1/free-zones/filters")
def free_zone_filters():
    return {
        "industries": INDUSTRY_FILTERS,
        "budgets": [b.value for b in BudgetTier],
        "sort_keys": [s.value for s in SortKey],
        "max_compare": MAX_COMPARE,
    }


@app.get("/api/v1/free-zones")
def list_free_zones(industry: str = ALL_INDUSTRIES, budget: str = "all", sort: str = "popular"):
    zones = filter_and_sort(FREE_ZONES, industry=industry, budget=budget, sort_key=sort)
    return {
        "items": [z.model_dump() for z in zones],
        "count": len(zones),
    }


@app.get("/api/v1/free-zones/compare", response_model=CompareOut)
def free_zone_compare(request: Request, ids: Optional[str] = None):
    if ids is not None:
        requested = dict.fromkeys(i.strip() for i in ids.split(","))
        selected = [i for i in requested if i in ZONES_BY_ID][:MAX_COMPARE]
    else:
        selected = _load_selection(request)
    return CompareOut(selected=selected, table=compare(selected))


@app.post("/api/v1/free-zones/compare/toggle", response_model=CompareOut)
def free_zone_compare_toggle(body: CompareToggleIn, request: Request, response: Response):
    if body.zone_id not in ZONES_BY_ID:
        raise HTTPException(status_code=404, detail=f"Unknown free zone: {body.zone_id}")

    selected = toggle_selection(_load_selection(request), body.zone_id)
    _write_cookie(response, COMPARE_COOKIE, selected)
    return CompareOut(selected=selected, table=compare(selected))


@app.delete("/api/v1/free-zones/compare", response_model=CompareOut)
def free_zone_compare_clear(response: Response):
    response.delete_cookie(key=COMPARE_COOKIE, path="/")
    return CompareOut(selected=[], table=compare([]))


# ----------------------------
# Lead capture routes
# ----------------------------
@app.get("/api/v1/leads/options")
def lead_options():
    return {
        "profiles": PROFILES,
        "services": SERVICES,
        "investment_brackets": INVESTMENT_BRACKETS,
        "timelines": TIMELINES,
        "jurisdictions": JURISDICTIONS,
    }


@app.post("/api/v1/leads", response_model=LeadAcknowledgement)
def submit_lead(body: LeadSubmission):
    return acknowledge(body)
