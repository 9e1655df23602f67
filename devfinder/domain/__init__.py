from devfinder.domain.models import (
    AvailabilityStatus,
    PriceBucket,
    ServiceProvider,
    UNAVAILABLE_STATUSES,
)

__all__ = [
    "AvailabilityStatus",
    "PriceBucket",
    "ServiceProvider",
    "UNAVAILABLE_STATUSES",
]
