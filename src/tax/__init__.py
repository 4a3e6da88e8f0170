"""Tax tables: federal brackets by year and flat state rates."""

from src.tax.state_rates import (
    DEFAULT_STATE_RATES,
    get_state_rates,
    normalize_state_code,
)
from src.tax.year_config import (
    TAX_YEAR_2024,
    TAX_YEAR_2025,
    TAX_YEAR_CONFIGS,
    TaxBracket,
    TaxYearConfig,
    get_tax_year_config,
)

__all__ = [
    "TaxBracket",
    "TaxYearConfig",
    "TAX_YEAR_2024",
    "TAX_YEAR_2025",
    "TAX_YEAR_CONFIGS",
    "get_tax_year_config",
    "DEFAULT_STATE_RATES",
    "get_state_rates",
    "normalize_state_code",
]
