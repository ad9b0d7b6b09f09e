"""Parcel registry: the fixed, ordered table of parcels on the site plan."""

from siteplan.registry.models import Parcel
from siteplan.registry.store import ParcelRegistry

__all__ = ["Parcel", "ParcelRegistry"]
