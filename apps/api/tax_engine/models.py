"""
Relocation Tax Engine: Data Models

A savings estimate needs three things:
1. Jurisdiction (progressive brackets + flat surcharges on total income)
2. Query (which jurisdiction, what annual income)
3. Result (home-country tax, destination tax, savings horizons)

The destination jurisdiction levies 0% personal income tax, so every unit of
home-country tax is a unit of savings.
"""

from typing import List, Optional, Any
from pydantic import BaseModel, ConfigDict, Field


# ─────────────────────────────────────────────
# Reference data
# ─────────────────────────────────────────────

class TaxBracket(BaseModel):
    """A contiguous income range taxed at a single marginal rate."""
    model_config = ConfigDict(frozen=True)

    min: float = Field(..., ge=0)
    max: Optional[float] = Field(
        default=None,
        description="Inclusive upper bound; None for the final unbounded bracket"
    )
    rate: float = Field(..., ge=0, description="Marginal rate in percent")

    @property
    def is_unbounded(self) -> bool:
        return self.max is None

    @property
    def width(self) -> Optional[float]:
        if self.is_unbounded:
            return None
        return self.max - self.min + 1


class FlatSurcharge(BaseModel):
    """An additional rate applied to total income regardless of bracket."""
    model_config = ConfigDict(frozen=True)

    name: str
    rate: float = Field(..., ge=0, description="Rate in percent of total income")


class TaxJurisdiction(BaseModel):
    """Static definition of one home-country tax regime."""
    model_config = ConfigDict(frozen=True)

    code: str = Field(..., description="Lookup key: uk, us, germany, ...")
    name: str
    currency_code: str
    currency_symbol: str
    usd_rate: float = Field(..., gt=0, description="Static local-currency to USD rate")
    brackets: List[TaxBracket]
    surcharges: List[FlatSurcharge] = Field(default_factory=list)


# ─────────────────────────────────────────────
# Input Models
# ─────────────────────────────────────────────

class TaxQuery(BaseModel):
    """One calculation request. Income is accepted as-is and normalised by the engine."""
    jurisdiction: str = Field(default="uk")
    annual_income: Any = Field(default=0)


# ─────────────────────────────────────────────
# Output Models
# ─────────────────────────────────────────────

class TaxLayer(BaseModel):
    """A single line of the home-country tax breakdown."""
    name: str
    rate: float = Field(default=0.0, description="Rate applied, in percent")
    base: float = Field(default=0.0, description="Income the rate was applied to")
    amount: float = Field(default=0.0)
    applies_to: str = Field(
        default="bracket",
        description="'bracket' (slice of income) or 'total_income' (flat surcharge)"
    )


class TaxResult(BaseModel):
    """Derived savings estimate. Never stored."""
    jurisdiction: str = Field(default="")
    jurisdiction_name: str = Field(default="")
    currency_symbol: str = Field(default="$")

    annual_income: float = Field(default=0.0)
    income_usd: float = Field(default=0.0)

    current_tax: float = Field(default=0.0)
    destination_tax: float = Field(default=0.0)
    effective_rate: float = Field(default=0.0, description="current_tax / income, in percent")

    annual_savings: float = Field(default=0.0)
    five_year_savings: float = Field(default=0.0)
    ten_year_savings: float = Field(default=0.0)

    layers: List[TaxLayer] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    def savings_over(self, years: int) -> float:
        """Savings over a horizon: simple multiple, no compounding or inflation."""
        return self.annual_savings * years
