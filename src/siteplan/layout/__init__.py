"""Site layout: sectors of parcels resolved to site-space cells."""

from siteplan.layout.models import Axis, Sector, SitePlan
from siteplan.layout.resolver import LayoutError, LayoutResolver
from siteplan.layout.site_plan import DEFAULT_SITE_PLAN, load_site_plan

__all__ = [
    "Axis",
    "DEFAULT_SITE_PLAN",
    "LayoutError",
    "LayoutResolver",
    "Sector",
    "SitePlan",
    "load_site_plan",
]
