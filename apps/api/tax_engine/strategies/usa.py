"""
Relocation Tax Engine: USA Strategy

Federal ordinary-income brackets (10%-37%, single filer) plus flat layers:
- State tax: 5% national average (CA up to 13.3%, TX/FL/WA = 0%)
- Social Security: 6.2%
- Medicare: 1.45%

The Social Security wage base cap is not modelled.
"""

from tax_engine.core import BaseTaxStrategy
from tax_engine.models import TaxBracket, FlatSurcharge


class USATaxStrategy(BaseTaxStrategy):
    """USA: Federal brackets + average state tax + FICA."""

    JURISDICTION_CODE = "us"
    JURISDICTION_NAME = "United States"
    CURRENCY_CODE = "USD"
    CURRENCY_SYMBOL = "$"
    USD_RATE = 1.0

    BRACKETS = [
        TaxBracket(min=0, max=11600, rate=10),
        TaxBracket(min=11601, max=47150, rate=12),
        TaxBracket(min=47151, max=100525, rate=22),
        TaxBracket(min=100526, max=191950, rate=24),
        TaxBracket(min=191951, max=243725, rate=32),
        TaxBracket(min=243726, max=609350, rate=35),
        TaxBracket(min=609351, rate=37),
    ]
    SURCHARGES = [
        FlatSurcharge(name="State Tax (avg)", rate=5),
        FlatSurcharge(name="Social Security", rate=6.2),
        FlatSurcharge(name="Medicare", rate=1.45),
    ]
