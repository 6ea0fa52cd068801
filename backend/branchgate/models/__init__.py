"""Convenience imports for Alembic metadata discovery."""

from branchgate.models.user import User
from branchgate.models.refresh_token import RefreshToken
from branchgate.models.location import City, Commune, Region
from branchgate.models.address import Address
from branchgate.models.branch import AccessPoint, Branch, BranchAddress
from branchgate.models.device import Device, DeviceDirection

__all__ = [
    "AccessPoint",
    "Address",
    "Branch",
    "BranchAddress",
    "City",
    "Commune",
    "Device",
    "DeviceDirection",
    "RefreshToken",
    "Region",
    "User",
]
