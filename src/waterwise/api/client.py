"""HTTP client for the WaterWise REST API.

Covers dashboard, properties, alerts, sensor data, weather and the user
profile. Requests carry the signed-in user's ID token as a bearer token.
"""

import logging
from typing import Any, Awaitable, Callable, Literal

import httpx

from waterwise.exceptions import ApiError, AuthError
from waterwise.models.alert import Alert
from waterwise.models.dashboard import DashboardData, SensorData, UserProfile
from waterwise.models.property import Property, PropertyCreate, PropertyUpdate

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://waterwise-api.azurewebsites.net/api"
DEFAULT_TIMEOUT = 10.0

TokenProvider = Callable[[], Awaitable[str | None]]
TimeRange = Literal["1h", "6h", "24h", "7d"]


class WaterWiseClient:
    """Client for the WaterWise API.

    Also serves as the session's PropertyCreator.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        token_provider: TokenProvider | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, without trailing slash
            timeout: Request timeout in seconds
            token_provider: Coroutine function returning the bearer token
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._token_provider = token_provider

    # Dashboard

    async def get_dashboard(self) -> DashboardData:
        data = await self._request("GET", "/dashboard")
        return DashboardData.model_validate(data)

    # Properties

    async def get_properties(self) -> list[Property]:
        data = await self._request("GET", "/properties")
        return [Property.model_validate(p) for p in data or []]

    async def get_property(self, property_id: str) -> Property:
        data = await self._request("GET", f"/properties/{property_id}")
        return Property.model_validate(data)

    async def create_property(self, owner_id: str, data: PropertyCreate) -> Property:
        """Create a property owned by ``owner_id``.

        Raises:
            ApiError: If the API rejects the request or is unreachable
        """
        payload = data.model_dump(by_alias=True, mode="json", exclude_none=True)
        payload["ownerId"] = owner_id
        created = await self._request("POST", "/properties", json=payload)
        if not isinstance(created, dict):
            raise ApiError("Malformed property response")
        # Older API versions omit the owner in the response
        created.setdefault("ownerId", owner_id)
        prop = Property.model_validate(created)
        logger.info(f"Created property {prop.id} for {owner_id}")
        return prop

    async def update_property(self, property_id: str, data: PropertyUpdate) -> Property:
        payload = data.model_dump(by_alias=True, mode="json", exclude_unset=True)
        updated = await self._request("PUT", f"/properties/{property_id}", json=payload)
        return Property.model_validate(updated)

    async def delete_property(self, property_id: str) -> None:
        await self._request("DELETE", f"/properties/{property_id}")
        logger.info(f"Deleted property {property_id}")

    async def get_sensor_data(
        self,
        property_id: str,
        time_range: TimeRange = "24h",
    ) -> SensorData:
        data = await self._request(
            "GET",
            f"/properties/{property_id}/sensors",
            params={"range": time_range},
        )
        return SensorData.model_validate(data)

    # Alerts

    async def get_alerts(self) -> list[Alert]:
        data = await self._request("GET", "/alerts")
        return [Alert.model_validate(a) for a in data or []]

    async def mark_alert_read(self, alert_id: str) -> None:
        await self._request("PATCH", f"/alerts/{alert_id}/read")

    async def delete_alert(self, alert_id: str) -> None:
        await self._request("DELETE", f"/alerts/{alert_id}")

    # Weather

    async def get_weather_forecast(self, latitude: float, longitude: float) -> dict[str, Any]:
        """Current conditions and a multi-day forecast.

        The forecast shape belongs to the weather provider, so it is
        returned as parsed JSON.
        """
        return await self._request(
            "GET",
            "/weather/forecast",
            params={"lat": latitude, "lon": longitude},
        )

    # User profile

    async def get_user_profile(self) -> UserProfile:
        data = await self._request("GET", "/user/profile")
        return UserProfile.model_validate(data)

    async def update_user_profile(self, profile: UserProfile) -> UserProfile:
        data = await self._request(
            "PUT",
            "/user/profile",
            json=profile.model_dump(by_alias=True, mode="json"),
        )
        return UserProfile.model_validate(data)

    async def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token_provider is not None:
            token = await self._token_provider()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None if empty).

        Raises:
            ApiError: On non-2xx status, transport failure, token refresh
                failure or a body that is not JSON
        """
        url = f"{self._base_url}{path}"
        try:
            headers = await self._headers()
        except AuthError as e:
            logger.warning(f"Could not get a token for {method} {path}: {e}")
            raise ApiError(f"Authentication unavailable: {e}") from e

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(
                    method,
                    url,
                    json=json,
                    params=params,
                    headers=headers,
                )
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout on {method} {path}")
            raise ApiError(f"Timeout on {method} {path}") from e
        except httpx.TransportError as e:
            logger.warning(f"Connection error on {method} {path}: {e}")
            raise ApiError(f"Connection error: {e}") from e

        if resp.status_code == 401:
            logger.warning(f"Unauthorized access on {method} {path}")
        if not 200 <= resp.status_code < 300:
            raise ApiError(
                f"HTTP {resp.status_code} on {method} {path}: {resp.text[:200]}",
                status_code=resp.status_code,
            )

        logger.debug(f"{method} {path} -> {resp.status_code}")
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            logger.warning(f"Non-JSON body on {method} {path}")
            raise ApiError(
                f"Invalid JSON on {method} {path}: {resp.text[:200]}",
                status_code=resp.status_code,
            ) from e
