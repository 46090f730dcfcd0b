"""WaterWise REST API client."""

from waterwise.api.client import WaterWiseClient

__all__ = ["WaterWiseClient"]
