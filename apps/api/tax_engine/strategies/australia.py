"""
Relocation Tax Engine: Australia Strategy

Resident brackets (tax-free threshold, then 19%-45%) + 2% Medicare Levy.
"""

from tax_engine.core import BaseTaxStrategy
from tax_engine.models import TaxBracket, FlatSurcharge


class AustraliaTaxStrategy(BaseTaxStrategy):
    """Australia: Resident rates + Medicare Levy."""

    JURISDICTION_CODE = "australia"
    JURISDICTION_NAME = "Australia"
    CURRENCY_CODE = "AUD"
    CURRENCY_SYMBOL = "A$"
    USD_RATE = 0.65

    BRACKETS = [
        TaxBracket(min=0, max=18200, rate=0),
        TaxBracket(min=18201, max=45000, rate=19),
        TaxBracket(min=45001, max=120000, rate=32.5),
        TaxBracket(min=120001, max=180000, rate=37),
        TaxBracket(min=180001, rate=45),
    ]
    SURCHARGES = [
        FlatSurcharge(name="Medicare Levy", rate=2),
    ]
