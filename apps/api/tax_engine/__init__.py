"""
Relocation Tax Engine: Home-Country vs 0% Destination Savings

Architecture:
- TaxEngine: Dispatcher that routes a query to a jurisdiction strategy
- TaxJurisdiction: Progressive brackets + flat surcharges (static tables)
- TaxQuery: Jurisdiction code + annual income
- TaxResult: Current tax, destination tax, effective rate, savings horizons
"""

from tax_engine.models import (
    TaxBracket,
    FlatSurcharge,
    TaxJurisdiction,
    TaxQuery,
    TaxResult,
    TaxLayer,
)
from tax_engine.core import (
    TaxEngine,
    compute_tax,
    normalize_income,
    format_amount,
    INCOME_PRESETS,
)

__all__ = [
    "TaxEngine",
    "compute_tax",
    "normalize_income",
    "format_amount",
    "INCOME_PRESETS",
    "TaxBracket",
    "FlatSurcharge",
    "TaxJurisdiction",
    "TaxQuery",
    "TaxResult",
    "TaxLayer",
]
