"""
Services module for business logic.

CLEAN ARCHITECTURE:
- domain/: Application services (business logic) - USE THESE
- crud/: Repository pattern, soft delete, audit fields
- lookup: Allow-lists for every string-enum field

Usage:
    from hotel_api.services.domain import RoomService
    service = RoomService(db)
    rooms = service.available(tenant_id, check_in, check_out)
"""
