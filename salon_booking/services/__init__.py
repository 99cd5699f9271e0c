from salon_booking.services.availability import AvailabilityService

__all__ = ["AvailabilityService"]
