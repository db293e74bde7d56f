from .booking import BookingBadge, BookingStatus, StatusBucket
from .experience import ActivityType, ExperienceStatus, ListingStatus

__all__ = [
    "ActivityType",
    "BookingBadge",
    "BookingStatus",
    "ExperienceStatus",
    "ListingStatus",
    "StatusBucket",
]
