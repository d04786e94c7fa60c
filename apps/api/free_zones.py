"""
UAE Free Zone Comparison

Filter/sort view over a fixed reference list of free zones, plus an ad hoc
side-by-side comparison of up to three zones picked by the visitor.
"""

import logging
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

MAX_COMPARE = 3

ALL_INDUSTRIES = "All Industries"

INDUSTRY_FILTERS = [
    ALL_INDUSTRIES,
    "Trading",
    "Tech",
    "Finance",
    "Consulting",
    "Media",
    "Logistics",
    "E-commerce",
    "Manufacturing",
]

# packageFrom thresholds, half-open: [0, 15000) budget, [15000, 30000) mid, [30000, inf) premium
MID_TIER_FROM = 15000
PREMIUM_TIER_FROM = 30000


class BudgetTier(str, Enum):
    ALL = "all"
    BUDGET = "budget"
    MID = "mid"
    PREMIUM = "premium"


class SortKey(str, Enum):
    POPULAR = "popular"
    PRICE = "price"
    RATING = "rating"


# ─────────────────────────────────────────────
# Records
# ─────────────────────────────────────────────

class FreeZoneCosts(BaseModel):
    """Starting prices in AED."""
    model_config = ConfigDict(frozen=True)

    license_from: float = Field(..., ge=0)
    visa_from: float = Field(..., ge=0)
    office_from: float = Field(..., ge=0)
    package_from: float = Field(..., ge=0)


class FreeZoneRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    short_name: str
    location: str
    founded_year: int
    description: str
    industries: Tuple[str, ...]
    highlights: Tuple[str, ...]
    costs: FreeZoneCosts
    visa_allocation: str
    ownership: str
    office_options: Tuple[str, ...]
    processing_time: str
    rating: float = Field(..., ge=0, le=5)
    is_popular: bool = False


def _zone(id, name, short_name, location, founded_year, description, industries,
          highlights, costs, visa_allocation, office_options, processing_time,
          rating, is_popular, ownership="100% Foreign"):
    license_from, visa_from, office_from, package_from = costs
    return FreeZoneRecord(
        id=id,
        name=name,
        short_name=short_name,
        location=location,
        founded_year=founded_year,
        description=description,
        industries=tuple(industries),
        highlights=tuple(highlights),
        costs=FreeZoneCosts(
            license_from=license_from,
            visa_from=visa_from,
            office_from=office_from,
            package_from=package_from,
        ),
        visa_allocation=visa_allocation,
        ownership=ownership,
        office_options=tuple(office_options),
        processing_time=processing_time,
        rating=rating,
        is_popular=is_popular,
    )


# costs are (license, visa, office, package)
FREE_ZONES: Tuple[FreeZoneRecord, ...] = (
    _zone(
        "dmcc", "Dubai Multi Commodities Centre", "DMCC", "JLT, Dubai", 2002,
        "World's leading free zone for commodities trade, awarded \"Global Free Zone of the Year\" multiple times.",
        ["Trading", "Commodities", "Consulting", "Tech", "Finance"],
        ["#1 Global Free Zone", "Premium JLT Address", "Strong Business Network"],
        (15000, 3500, 12000, 22000),
        "3-6 visas",
        ["Flexi-desk", "Hot Desk", "Dedicated Desk", "Private Office", "Warehouse"],
        "3-5 days", 4.8, True,
    ),
    _zone(
        "difc", "Dubai International Financial Centre", "DIFC", "DIFC, Dubai", 2004,
        "Premier financial hub with independent legal framework based on English Common Law.",
        ["Finance", "Banking", "Insurance", "Asset Management", "Legal", "Fintech"],
        ["Common Law Jurisdiction", "DIFC Courts", "Top Financial Hub"],
        (20000, 4000, 25000, 45000),
        "2-6 visas",
        ["Flexi-desk", "Private Office", "Co-working"],
        "5-7 days", 4.9, True,
    ),
    _zone(
        "dafza", "Dubai Airport Free Zone", "DAFZA", "Near DXB Airport", 1996,
        "Strategic location adjacent to Dubai International Airport, ideal for logistics and trade.",
        ["Logistics", "Aviation", "Trading", "Pharma", "Electronics"],
        ["Airport Adjacent", "Excellent Logistics", "Tax Exemptions"],
        (12000, 3000, 15000, 20000),
        "3-6 visas",
        ["Flexi-desk", "Office", "Warehouse", "Land"],
        "3-5 days", 4.6, True,
    ),
    _zone(
        "jafza", "Jebel Ali Free Zone", "JAFZA", "Jebel Ali, Dubai", 1985,
        "Largest and oldest free zone in the Middle East, connected to Jebel Ali Port.",
        ["Manufacturing", "Logistics", "Trading", "Heavy Industry", "Automotive"],
        ["Largest Free Zone", "Port Access", "Manufacturing Hub"],
        (15000, 3500, 18000, 25000),
        "3-unlimited",
        ["Office", "Warehouse", "Land", "Factory"],
        "3-7 days", 4.7, True,
    ),
    _zone(
        "ifza", "International Free Zone Authority", "IFZA", "Dubai Silicon Oasis", 2017,
        "Cost-effective free zone with streamlined processes, popular among startups and SMEs.",
        ["Consulting", "E-commerce", "IT", "Trading", "Services"],
        ["Budget Friendly", "Fast Setup", "Flexible Packages"],
        (5750, 3000, 0, 11500),
        "2-6 visas",
        ["Virtual Office", "Flexi-desk", "Private Office"],
        "2-3 days", 4.4, True,
    ),
    _zone(
        "rakez", "Ras Al Khaimah Economic Zone", "RAKEZ", "RAK, UAE", 2017,
        "Affordable alternative outside Dubai with excellent value and flexible regulations.",
        ["Trading", "Consulting", "E-commerce", "Manufacturing", "Services"],
        ["Most Affordable", "No Office Required", "RAK Location"],
        (5500, 2500, 0, 9500),
        "2-3 visas",
        ["Virtual Office", "Flexi-desk", "Warehouse"],
        "2-4 days", 4.3, False,
    ),
    _zone(
        "dso", "Dubai Silicon Oasis", "DSO", "Silicon Oasis, Dubai", 2004,
        "Technology-focused free zone with integrated tech park and residential community.",
        ["Tech", "Software", "Electronics", "R&D", "Smart Tech"],
        ["Tech Focused", "Innovation Hub", "Integrated Community"],
        (10000, 3500, 12000, 18000),
        "2-6 visas",
        ["Flexi-desk", "Office", "Tech Lab"],
        "3-5 days", 4.5, False,
    ),
    _zone(
        "tecom", "Dubai Internet City / Media City", "TECOM", "Media City, Dubai", 1999,
        "Premier hub for technology, media, and creative industries in the heart of Dubai.",
        ["Tech", "Media", "Marketing", "Advertising", "Digital"],
        ["Media & Tech Hub", "Premium Location", "Industry Network"],
        (15000, 3500, 20000, 30000),
        "3-6 visas",
        ["Flexi-desk", "Office", "Studio"],
        "3-5 days", 4.6, False,
    ),
    _zone(
        "adgm", "Abu Dhabi Global Market", "ADGM", "Al Maryah Island, Abu Dhabi", 2013,
        "International financial centre with Common Law jurisdiction, rivaling DIFC.",
        ["Finance", "Asset Management", "Fintech", "Wealth Management"],
        ["Common Law", "Financial Hub", "Abu Dhabi Location"],
        (15000, 4000, 20000, 35000),
        "2-6 visas",
        ["Flexi-desk", "Private Office"],
        "5-10 days", 4.7, False,
    ),
    _zone(
        "shams", "Sharjah Media City", "SHAMS", "Sharjah, UAE", 2017,
        "Budget-friendly free zone in Sharjah, popular for freelancers and small businesses.",
        ["Media", "E-commerce", "Consulting", "Trading", "Services"],
        ["Very Affordable", "Freelancer Friendly", "Quick Setup"],
        (5750, 2800, 0, 9500),
        "1-3 visas",
        ["Virtual Office", "Flexi-desk"],
        "1-3 days", 4.2, False,
    ),
)

ZONES_BY_ID = {z.id: z for z in FREE_ZONES}


# ─────────────────────────────────────────────
# Filter + sort
# ─────────────────────────────────────────────

def budget_tier_of(package_from: float) -> BudgetTier:
    if package_from < MID_TIER_FROM:
        return BudgetTier.BUDGET
    if package_from < PREMIUM_TIER_FROM:
        return BudgetTier.MID
    return BudgetTier.PREMIUM


def parse_budget(value) -> BudgetTier:
    try:
        return BudgetTier(value)
    except ValueError:
        return BudgetTier.ALL


def parse_sort(value) -> SortKey:
    try:
        return SortKey(value)
    except ValueError:
        return SortKey.POPULAR


def _is_all_industries(industry: Optional[str]) -> bool:
    return not industry or industry in (ALL_INDUSTRIES, "all")


def filter_and_sort(
    records: Iterable[FreeZoneRecord],
    industry: Optional[str] = ALL_INDUSTRIES,
    budget=BudgetTier.ALL,
    sort_key=SortKey.POPULAR,
) -> List[FreeZoneRecord]:
    """
    Return a new ordered list; the source is never mutated.

    Unknown industries, budget tiers and sort keys fall back to "all",
    "all" and "popular".
    """
    budget = parse_budget(budget)
    sort_key = parse_sort(sort_key)

    zones = list(records)

    if not _is_all_industries(industry):
        known = set(INDUSTRY_FILTERS).union(*(z.industries for z in zones))
        if industry in known:
            zones = [z for z in zones if industry in z.industries]
        else:
            logger.info("Unknown industry filter %r; showing all industries", industry)

    if budget is not BudgetTier.ALL:
        zones = [z for z in zones if budget_tier_of(z.costs.package_from) is budget]

    # sorted() is stable, so ties keep source order
    if sort_key is SortKey.PRICE:
        zones = sorted(zones, key=lambda z: z.costs.package_from)
    elif sort_key is SortKey.RATING:
        zones = sorted(zones, key=lambda z: z.rating, reverse=True)
    else:
        zones = sorted(zones, key=lambda z: not z.is_popular)

    return zones


# ─────────────────────────────────────────────
# Comparison
# ─────────────────────────────────────────────

def toggle_selection(selected_ids: Sequence[str], zone_id: str) -> List[str]:
    """
    Add or remove a zone from the comparison. Once MAX_COMPARE zones are
    selected, further additions are ignored.
    """
    selected = list(selected_ids)
    if zone_id in selected:
        return [z for z in selected if z != zone_id]
    if len(selected) < MAX_COMPARE:
        return selected + [zone_id]
    logger.info("Comparison full (%d zones); ignoring %s", MAX_COMPARE, zone_id)
    return selected


class ComparisonColumn(BaseModel):
    id: str
    short_name: str
    location: str


class ComparisonRow(BaseModel):
    feature: str
    values: List[Any]


class ComparisonTable(BaseModel):
    columns: List[ComparisonColumn] = Field(default_factory=list)
    rows: List[ComparisonRow] = Field(default_factory=list)


COMPARISON_FEATURES = [
    ("Package From", lambda z: z.costs.package_from),
    ("License Cost", lambda z: z.costs.license_from),
    ("Visa Cost", lambda z: z.costs.visa_from),
    ("Visa Allocation", lambda z: z.visa_allocation),
    ("Processing Time", lambda z: z.processing_time),
    ("Ownership", lambda z: z.ownership),
    ("Industries", lambda z: list(z.industries[:3])),
    ("Rating", lambda z: z.rating),
]


def compare(selected_ids: Sequence[str], records: Iterable[FreeZoneRecord] = FREE_ZONES) -> ComparisonTable:
    """
    Project the selected zones onto the fixed comparison rows.

    Columns follow selection order; unknown and repeated ids are skipped.
    """
    by_id = {z.id: z for z in records}
    zones = [by_id[i] for i in dict.fromkeys(selected_ids) if i in by_id][:MAX_COMPARE]

    return ComparisonTable(
        columns=[
            ComparisonColumn(id=z.id, short_name=z.short_name, location=z.location)
            for z in zones
        ],
        rows=[
            ComparisonRow(feature=feature, values=[pick(z) for z in zones])
            for feature, pick in COMPARISON_FEATURES
        ],
    )
