"""
Read-only lookup endpoints: the allow-list of every enum-like field, so
clients can build their selects from the same values the API validates.
"""

from fastapi import APIRouter, Depends

from hotel_api.routers._common import current_user
from hotel_api.services import lookup
from shared.utils.exceptions import NotFoundError


router = APIRouter(prefix="/api/lookup", tags=["lookup"])


@router.get("")
def get_lookups(user: dict = Depends(current_user)) -> dict:
    """All fields with their values, plus the default of each field that has one."""
    return {"values": lookup.get_all(), "defaults": lookup.get_defaults()}


@router.get("/{field}")
def get_lookup(field: str, user: dict = Depends(current_user)) -> dict:
    if field not in lookup.fields():
        raise NotFoundError("Lookup field", field)
    return {
        "field": field,
        "values": lookup.get_values(field),
        "default": lookup.get_defaults().get(field),
    }
