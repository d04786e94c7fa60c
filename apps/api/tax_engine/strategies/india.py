"""
Relocation Tax Engine: India Strategy

New-regime slabs (0%-30%) + a flat 10% surcharge.

The real surcharge only applies above ₹50 lakh and is charged on the tax,
not on income; here it is a flat layer on income like every other surcharge.
"""

from tax_engine.core import BaseTaxStrategy
from tax_engine.models import TaxBracket, FlatSurcharge


class IndiaTaxStrategy(BaseTaxStrategy):
    """India: New Tax Regime slabs + high-income surcharge."""

    JURISDICTION_CODE = "india"
    JURISDICTION_NAME = "India"
    CURRENCY_CODE = "INR"
    CURRENCY_SYMBOL = "₹"
    USD_RATE = 0.012

    BRACKETS = [
        TaxBracket(min=0, max=300000, rate=0),
        TaxBracket(min=300001, max=700000, rate=5),
        TaxBracket(min=700001, max=1000000, rate=10),
        TaxBracket(min=1000001, max=1200000, rate=15),
        TaxBracket(min=1200001, max=1500000, rate=20),
        TaxBracket(min=1500001, rate=30),
    ]
    SURCHARGES = [
        FlatSurcharge(name="Surcharge (high income)", rate=10),
    ]
