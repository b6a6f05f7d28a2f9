"""Show package catalog with pricing, durations, and descriptions."""

import logging
from typing import Optional, Union

from showbook.config import settings
from showbook.schemas.booking_schema import PackageType

logger = logging.getLogger(__name__)

PACKAGE_CATALOG: dict[PackageType, dict] = {
    PackageType.PRESCHOOL: {
        "name": "Preschool Special",
        "duration": "30-45 mins",
        "price": 1200,
        "description": "Perfect for young learners with interactive science demonstrations",
    },
    PackageType.CLASSIC: {
        "name": "Classic Show",
        "duration": "45-60 mins",
        "price": 1800,
        "description": "Engaging science show with hands-on experiments",
    },
    PackageType.HALFDAY: {
        "name": "Half-Day Experience",
        "duration": "4 hours",
        "price": 2500,
        "description": "Comprehensive science adventure with multiple activities",
    },
}


def _lookup(package_id: Union[PackageType, str]) -> Optional[PackageType]:
    try:
        return PackageType(package_id.lower().strip() if isinstance(package_id, str) else package_id)
    except ValueError:
        return None


def get_all_packages() -> list[dict]:
    """Return all packages with basic info."""
    return [
        {"id": pid.value, "name": info["name"], "price": info["price"]}
        for pid, info in PACKAGE_CATALOG.items()
    ]


def get_package_details(package_id: Union[PackageType, str]) -> Optional[dict]:
    """Get full details for a specific package."""
    package = _lookup(package_id)
    if package is None:
        return None
    return {"id": package.value, **PACKAGE_CATALOG[package]}


def get_package_price(package_id: Union[PackageType, str]) -> Optional[int]:
    """Price in whole currency units, or None for an unknown package."""
    package = _lookup(package_id)
    if package is None:
        logger.warning("No price for unknown package %r", package_id)
        return None
    return PACKAGE_CATALOG[package]["price"]


def get_display_name(package_id: Union[PackageType, str]) -> str:
    """Name with duration, e.g. "Classic Show (45-60 mins)"."""
    details = get_package_details(package_id)
    if details is None:
        return str(package_id)
    return f"{details['name']} ({details['duration']})"


def format_currency(amount: int) -> str:
    """Format an amount with the business currency, e.g. "AED 1,800"."""
    return f"{settings.business.currency} {amount:,}"
