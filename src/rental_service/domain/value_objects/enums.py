from __future__ import annotations

from enum import StrEnum


class UserRole(StrEnum):
    TENANT = "tenant"
    OWNER = "owner"


class PropertyType(StrEnum):
    APARTMENT = "apartment"
    HOUSE = "house"
    DUPLEX = "duplex"
    VILLA = "villa"
    COMMERCIAL = "commercial"
