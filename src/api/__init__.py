"""API module exports."""

from src.api.calculators import router as calculators_router
from src.api.contact import router as contact_router
from src.api.deps import get_db, verify_admin_api_key
from src.api.health import router as health_router
from src.api.tax import router as tax_router
from src.api.visitors import router as visitors_router
