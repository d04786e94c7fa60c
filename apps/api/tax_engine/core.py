"""
Relocation Tax Engine: Core Computation + Dispatcher

compute_tax is the single computation. It:
1. Normalises the income (anything non-numeric or negative counts as 0)
2. Walks the jurisdiction's progressive brackets
3. Adds flat surcharges on the full income
4. Derives the savings horizons against the 0% destination

TaxEngine routes a TaxQuery to the jurisdiction strategy that owns the table.
"""

import logging
import math
from typing import Any, Dict, List

from tax_engine.models import (
    TaxBracket,
    FlatSurcharge,
    TaxJurisdiction,
    TaxQuery,
    TaxResult,
    TaxLayer,
)

logger = logging.getLogger(__name__)

# 0% personal income tax at the destination
DESTINATION_TAX = 0.0
DESTINATION_NAME = "United Arab Emirates"

# Quick-select incomes offered next to the calculator
INCOME_PRESETS = [100000, 250000, 500000, 1000000]


# ─────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────

def normalize_income(value: Any) -> float:
    """
    Coerce user input to a non-negative income.

    Accepts numbers and numeric strings (thousands separators allowed).
    Everything else, including negatives, NaN and infinities, becomes 0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        income = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(income) or math.isinf(income) or income < 0:
        return 0.0
    return income


def format_amount(amount: float, symbol: str = "$") -> str:
    """Render an amount the way the calculator displays it: symbol, separators, no decimals."""
    return f"{symbol}{amount:,.0f}"


def _bracket_label(bracket: TaxBracket) -> str:
    if bracket.is_unbounded:
        return f"{bracket.rate:g}% above {bracket.min:,.0f}"
    return f"{bracket.rate:g}% on {bracket.min:,.0f} - {bracket.max:,.0f}"


def bracket_layers(brackets: List[TaxBracket], income: float) -> List[TaxLayer]:
    """Tax each slice of income at its bracket's marginal rate."""
    layers: List[TaxLayer] = []
    remaining = income

    for bracket in brackets:
        if remaining <= 0:
            break
        width = bracket.width
        taxable = remaining if width is None else min(remaining, width)
        layers.append(TaxLayer(
            name=_bracket_label(bracket),
            rate=bracket.rate,
            base=taxable,
            amount=taxable * (bracket.rate / 100),
            applies_to="bracket",
        ))
        remaining -= taxable

    return layers


def surcharge_layers(surcharges: List[FlatSurcharge], income: float) -> List[TaxLayer]:
    """
    Flat surcharges are charged on the full income, not on what the brackets
    left over.
    """
    return [
        TaxLayer(
            name=s.name,
            rate=s.rate,
            base=income,
            amount=income * (s.rate / 100),
            applies_to="total_income",
        )
        for s in surcharges
    ]


# ─────────────────────────────────────────────
# Computation
# ─────────────────────────────────────────────

def compute_tax(jurisdiction: TaxJurisdiction, annual_income: Any) -> TaxResult:
    """
    Home-country tax versus the destination for one income.

    Total over its domain: never raises for odd input.
    """
    income = normalize_income(annual_income)

    layers = bracket_layers(jurisdiction.brackets, income)
    layers.extend(surcharge_layers(jurisdiction.surcharges, income))
    current_tax = sum(l.amount for l in layers)

    effective_rate = (current_tax / income * 100) if income > 0 else 0.0
    annual_savings = current_tax - DESTINATION_TAX

    logger.debug(
        "compute_tax jurisdiction=%s income=%.2f tax=%.2f",
        jurisdiction.code, income, current_tax,
    )

    return TaxResult(
        jurisdiction=jurisdiction.code,
        jurisdiction_name=jurisdiction.name,
        currency_symbol=jurisdiction.currency_symbol,
        annual_income=income,
        income_usd=income * jurisdiction.usd_rate,
        current_tax=current_tax,
        destination_tax=DESTINATION_TAX,
        effective_rate=effective_rate,
        annual_savings=annual_savings,
        five_year_savings=annual_savings * 5,
        ten_year_savings=annual_savings * 10,
        layers=layers,
    )


# ─────────────────────────────────────────────
# Strategy base
# ─────────────────────────────────────────────

class BaseTaxStrategy:
    """
    One home-country regime. Subclasses only declare their tables; the
    computation is shared.
    """

    JURISDICTION_CODE: str = ""
    JURISDICTION_NAME: str = ""
    CURRENCY_CODE: str = "USD"
    CURRENCY_SYMBOL: str = "$"
    USD_RATE: float = 1.0

    BRACKETS: List[TaxBracket] = []
    SURCHARGES: List[FlatSurcharge] = []

    def __init__(self):
        self._jurisdiction = TaxJurisdiction(
            code=self.JURISDICTION_CODE,
            name=self.JURISDICTION_NAME,
            currency_code=self.CURRENCY_CODE,
            currency_symbol=self.CURRENCY_SYMBOL,
            usd_rate=self.USD_RATE,
            brackets=list(self.BRACKETS),
            surcharges=list(self.SURCHARGES),
        )

    @property
    def jurisdiction(self) -> TaxJurisdiction:
        return self._jurisdiction

    def calculate(self, annual_income: Any) -> TaxResult:
        return compute_tax(self._jurisdiction, annual_income)


# ─────────────────────────────────────────────
# Engine (Factory / Dispatcher)
# ─────────────────────────────────────────────

class TaxEngine:
    """
    Main entry point for savings calculations.
    Routes to jurisdiction strategies by code.
    """

    _strategies: Dict[str, BaseTaxStrategy] = {}

    def __init__(self):
        # Lazy-import strategies to avoid circular imports
        from tax_engine.strategies.europe import (
            UKTaxStrategy,
            GermanyTaxStrategy,
            FranceTaxStrategy,
        )
        from tax_engine.strategies.usa import USATaxStrategy
        from tax_engine.strategies.canada import CanadaTaxStrategy
        from tax_engine.strategies.australia import AustraliaTaxStrategy
        from tax_engine.strategies.india import IndiaTaxStrategy

        # Insertion order is the order the calculator lists countries in
        self._strategies = {
            s.JURISDICTION_CODE: s
            for s in (
                UKTaxStrategy(),
                USATaxStrategy(),
                GermanyTaxStrategy(),
                FranceTaxStrategy(),
                AustraliaTaxStrategy(),
                CanadaTaxStrategy(),
                IndiaTaxStrategy(),
            )
        }

    def get_strategy(self, code: str):
        return self._strategies.get((code or "").strip().lower())

    def calculate(self, query: TaxQuery) -> TaxResult:
        """Calculate savings using the matching jurisdiction strategy."""
        strategy = self.get_strategy(query.jurisdiction)
        if not strategy:
            logger.info("Unsupported jurisdiction requested: %r", query.jurisdiction)
            return TaxResult(
                jurisdiction=query.jurisdiction,
                annual_income=normalize_income(query.annual_income),
                warnings=[
                    f"No tax table for '{query.jurisdiction}'. "
                    f"Supported: {list(self._strategies.keys())}"
                ],
            )
        return strategy.calculate(query.annual_income)

    def get_supported_jurisdictions(self) -> List[Dict[str, Any]]:
        """Return supported jurisdictions in display order."""
        return [
            {
                "code": s.JURISDICTION_CODE,
                "name": s.JURISDICTION_NAME,
                "currency_code": s.CURRENCY_CODE,
                "currency_symbol": s.CURRENCY_SYMBOL,
            }
            for s in self._strategies.values()
        ]
