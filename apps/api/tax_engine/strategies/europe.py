"""
Relocation Tax Engine: European Strategies

Per-country tables (NOT "Europe" as one regime).

UK:      0/20/40/45% bands + 8% National Insurance
Germany: 0/14/42/45% bands + 5.5% Solidarity Surcharge
France:  0/11/30/41/45% bands + 9.7% social charges
"""

from tax_engine.core import BaseTaxStrategy
from tax_engine.models import TaxBracket, FlatSurcharge


# ═══════════════════════════════════════════════
# 🇬🇧 UNITED KINGDOM
# ═══════════════════════════════════════════════

class UKTaxStrategy(BaseTaxStrategy):
    """UK: Personal allowance, basic/higher/additional rate, National Insurance."""

    JURISDICTION_CODE = "uk"
    JURISDICTION_NAME = "United Kingdom"
    CURRENCY_CODE = "GBP"
    CURRENCY_SYMBOL = "£"
    USD_RATE = 1.27

    BRACKETS = [
        TaxBracket(min=0, max=12570, rate=0),        # Personal allowance
        TaxBracket(min=12571, max=50270, rate=20),   # Basic rate
        TaxBracket(min=50271, max=125140, rate=40),  # Higher rate
        TaxBracket(min=125141, rate=45),             # Additional rate
    ]
    SURCHARGES = [
        FlatSurcharge(name="National Insurance", rate=8),
    ]


# ═══════════════════════════════════════════════
# 🇩🇪 GERMANY
# ═══════════════════════════════════════════════

class GermanyTaxStrategy(BaseTaxStrategy):
    """Germany: Grundfreibetrag, progressive zone, Reichensteuer."""

    JURISDICTION_CODE = "germany"
    JURISDICTION_NAME = "Germany"
    CURRENCY_CODE = "EUR"
    CURRENCY_SYMBOL = "€"
    USD_RATE = 1.08

    BRACKETS = [
        TaxBracket(min=0, max=11604, rate=0),
        TaxBracket(min=11605, max=66760, rate=14),
        TaxBracket(min=66761, max=277825, rate=42),
        TaxBracket(min=277826, rate=45),
    ]
    # Simplified: charged on income rather than on the tax amount
    SURCHARGES = [
        FlatSurcharge(name="Solidarity Surcharge", rate=5.5),
    ]


# ═══════════════════════════════════════════════
# 🇫🇷 FRANCE
# ═══════════════════════════════════════════════

class FranceTaxStrategy(BaseTaxStrategy):
    """France: barème progressif + prélèvements sociaux."""

    JURISDICTION_CODE = "france"
    JURISDICTION_NAME = "France"
    CURRENCY_CODE = "EUR"
    CURRENCY_SYMBOL = "€"
    USD_RATE = 1.08

    BRACKETS = [
        TaxBracket(min=0, max=11294, rate=0),
        TaxBracket(min=11295, max=28797, rate=11),
        TaxBracket(min=28798, max=82341, rate=30),
        TaxBracket(min=82342, max=177106, rate=41),
        TaxBracket(min=177107, rate=45),
    ]
    SURCHARGES = [
        FlatSurcharge(name="Social Charges", rate=9.7),
    ]
