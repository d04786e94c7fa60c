"""
Relocation Tax Engine: Canada Strategy

Federal brackets (15%-33%) + average provincial layer + CPP.
Provincial rates range from ~10% (AB) to ~25% (QC); 12% is used as a blend.
"""

from tax_engine.core import BaseTaxStrategy
from tax_engine.models import TaxBracket, FlatSurcharge


class CanadaTaxStrategy(BaseTaxStrategy):
    """Canada: Federal + Provincial (avg) + CPP."""

    JURISDICTION_CODE = "canada"
    JURISDICTION_NAME = "Canada"
    CURRENCY_CODE = "CAD"
    CURRENCY_SYMBOL = "C$"
    USD_RATE = 0.74

    BRACKETS = [
        TaxBracket(min=0, max=55867, rate=15),
        TaxBracket(min=55868, max=111733, rate=20.5),
        TaxBracket(min=111734, max=173205, rate=26),
        TaxBracket(min=173206, max=246752, rate=29),
        TaxBracket(min=246753, rate=33),
    ]
    SURCHARGES = [
        FlatSurcharge(name="Provincial Tax (avg)", rate=12),
        FlatSurcharge(name="CPP", rate=5.95),
    ]
