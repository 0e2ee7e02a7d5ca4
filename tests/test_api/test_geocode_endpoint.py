"""Tests for the geocode endpoint."""

import httpx
import pytest
from httpx import AsyncClient

from georesolve.geocoding.aggregator import dedup_key
from georesolve.geocoding.providers.geoapify import GeoapifyProvider
from georesolve.geocoding.providers.google import GoogleFindPlaceProvider
from georesolve.geocoding.providers.mapbox import MapboxProvider
from georesolve.geocoding.providers.nominatim import NominatimProvider
from georesolve.geocoding.types import Candidate, CanonicalMeta
from tests.fixtures.geocoding import (
    geoapify_feature,
    geoapify_payload,
    google_findplace_payload,
    google_place,
    json_handler,
    mapbox_feature,
    mapbox_payload,
    nominatim_entry,
)

GEOCODE_URL = "/api/v1/geocode"


def _tx_geoapify(provider_factory):
    return provider_factory(
        GeoapifyProvider,
        json_handler(
            geoapify_payload(
                geoapify_feature(
                    "Town Hall, 301 W 2nd St, Austin, TX 78701, United States of America",
                    30.2650,
                    -97.7467,
                    result_type="amenity",
                    city="Austin",
                    state="Texas",
                    state_code="TX",
                )
            )
        ),
    )


def _ca_mapbox(provider_factory):
    return provider_factory(
        MapboxProvider,
        json_handler(
            mapbox_payload(
                mapbox_feature(
                    "Town Hall, 2600 Fresno St, Fresno, California 93721, United States",
                    lat=36.7378,
                    lng=-119.7871,
                    city="Fresno",
                    region="California",
                    region_short_code="US-CA",
                )
            )
        ),
    )


class TestStrictMode:
    """Strict single-answer requests."""

    @pytest.mark.asyncio
    async def test_returns_hit_in_expected_locality(
        self, test_app_async_client: AsyncClient, install_service, provider_factory
    ) -> None:
        """A specific query resolves to the place in the expected city."""
        install_service(
            [
                provider_factory(
                    GoogleFindPlaceProvider,
                    json_handler(
                        google_findplace_payload(
                            google_place(
                                "12 Main St, Rivertown, NY 10001, USA",
                                lat=41.05,
                                lng=-73.87,
                            )
                        )
                    ),
                )
            ]
        )

        response = await test_app_async_client.post(
            GEOCODE_URL,
            json={
                "q": "Coffee Shop, Rivertown, NY",
                "expectCity": "Rivertown",
                "expectRegionCode": "NY",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["provider"] == "google_findplace"
        assert body["address_text"] == "12 Main St, Rivertown, NY 10001, USA"
        assert (body["lat"], body["lng"]) == (41.05, -73.87)
        assert "rivertown" in body["meta"]["city"].lower()
        assert body["meta"]["regionCode"] == "NY"

    @pytest.mark.asyncio
    async def test_skips_hit_outside_expected_region(
        self, test_app_async_client: AsyncClient, install_service, provider_factory
    ) -> None:
        """A TX hit from the first provider loses to a CA hit from the next."""
        install_service([_tx_geoapify(provider_factory), _ca_mapbox(provider_factory)])

        response = await test_app_async_client.post(
            GEOCODE_URL, json={"q": "Town Hall", "expectRegionCode": "CA"}
        )

        assert response.status_code == 200
        assert response.json()["provider"] == "mapbox"
        assert response.json()["meta"]["regionCode"] == "CA"

    @pytest.mark.asyncio
    async def test_accepts_older_expect_state_field(
        self, test_app_async_client: AsyncClient, install_service, provider_factory
    ) -> None:
        install_service([_tx_geoapify(provider_factory), _ca_mapbox(provider_factory)])

        response = await test_app_async_client.post(
            GEOCODE_URL, json={"q": "Town Hall", "expectState": "CA"}
        )

        assert response.json()["provider"] == "mapbox"

    @pytest.mark.asyncio
    async def test_all_providers_failing_is_not_found(
        self, test_app_async_client: AsyncClient, install_service, provider_factory
    ) -> None:
        """Non-success provider responses end in a 404, not a 500."""
        install_service(
            [
                provider_factory(GoogleFindPlaceProvider, json_handler({}, 500)),
                provider_factory(GeoapifyProvider, json_handler({}, 401)),
                provider_factory(MapboxProvider, json_handler({}, 429)),
                provider_factory(NominatimProvider, json_handler({}, 503)),
            ]
        )

        response = await test_app_async_client.post(
            GEOCODE_URL, json={"q": "123 Main St"}
        )

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "No precise match found in specified city/state"
        assert body["error_type"] == "NotFoundError"

    @pytest.mark.asyncio
    async def test_transport_failure_falls_through(
        self, test_app_async_client: AsyncClient, install_service, provider_factory
    ) -> None:
        """A network error in one provider does not abort the chain."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        install_service(
            [provider_factory(GeoapifyProvider, refuse), _ca_mapbox(provider_factory)]
        )

        response = await test_app_async_client.post(
            GEOCODE_URL, json={"q": "Town Hall, Fresno, CA"}
        )

        assert response.status_code == 200
        assert response.json()["provider"] == "mapbox"


class TestValidation:
    """Request validation."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"q": ""}, {"q": "   "}, {}])
    async def test_missing_query_is_bad_request(
        self, test_app_async_client: AsyncClient, install_service, payload
    ) -> None:
        install_service([])

        response = await test_app_async_client.post(GEOCODE_URL, json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing q"

    @pytest.mark.asyncio
    async def test_empty_body_is_bad_request(
        self, test_app_async_client: AsyncClient, install_service
    ) -> None:
        install_service([])

        response = await test_app_async_client.post(GEOCODE_URL)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing q"

    @pytest.mark.asyncio
    async def test_malformed_body_is_unprocessable(
        self, test_app_async_client: AsyncClient, install_service
    ) -> None:
        install_service([])

        response = await test_app_async_client.post(
            GEOCODE_URL, json={"q": {"text": "Town Hall"}}
        )

        assert response.status_code == 422
        assert response.json()["error_type"] == "RequestValidationError"

    @pytest.mark.asyncio
    async def test_invalid_bias_point_is_ignored(
        self, test_app_async_client: AsyncClient, install_service, provider_factory
    ) -> None:
        """An out-of-range bias point is dropped rather than rejected."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=[])

        install_service([provider_factory(NominatimProvider, handler)])

        response = await test_app_async_client.post(
            GEOCODE_URL, json={"q": "Town Hall", "near": {"lat": 123.0, "lng": 0}}
        )

        assert response.status_code == 404
        assert "viewbox" not in requests[0].url.params


class TestCandidateMode:
    """Candidate list requests."""

    @pytest.mark.asyncio
    async def test_returns_unique_capped_candidates(
        self, test_app_async_client: AsyncClient, install_service, provider_factory
    ) -> None:
        """Overlapping provider results are merged and capped at eight."""
        features = [
            geoapify_feature(f"{i} Main St, Springfield, IL", 39.78 + i / 100, -89.65)
            for i in range(1, 7)
        ]
        mapbox_features = [
            mapbox_feature(
                f"{i} Main St, Springfield, IL", 39.78 + i / 100, -89.65, ["address"]
            )
            for i in range(4, 10)
        ]
        install_service(
            [
                provider_factory(GeoapifyProvider, json_handler(geoapify_payload(*features))),
                provider_factory(
                    MapboxProvider, json_handler(mapbox_payload(*mapbox_features))
                ),
            ]
        )

        response = await test_app_async_client.post(
            GEOCODE_URL, json={"q": "123 Main St", "candidates": True}
        )

        assert response.status_code == 200
        candidates = response.json()["candidates"]
        assert 0 < len(candidates) <= 8
        keys = {
            dedup_key(
                Candidate(
                    provider=c["provider"],
                    label=c["label"],
                    lat=c["lat"],
                    lng=c["lng"],
                    meta=CanonicalMeta(),
                )
            )
            for c in candidates
        }
        assert len(keys) == len(candidates)
        scores = [c["score"] for c in candidates]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_ranks_expected_region_first(
        self, test_app_async_client: AsyncClient, install_service, provider_factory
    ) -> None:
        install_service([_tx_geoapify(provider_factory), _ca_mapbox(provider_factory)])

        response = await test_app_async_client.post(
            GEOCODE_URL,
            json={"q": "Town Hall", "expectRegionCode": "CA", "candidates": True},
        )

        assert response.status_code == 200
        regions = [c["meta"]["regionCode"] for c in response.json()["candidates"]]
        assert regions == ["CA", "TX"]

    @pytest.mark.asyncio
    async def test_includes_distance_when_biased(
        self, test_app_async_client: AsyncClient, install_service, provider_factory
    ) -> None:
        install_service([_ca_mapbox(provider_factory)])

        response = await test_app_async_client.post(
            GEOCODE_URL,
            json={
                "q": "Town Hall",
                "near": {"lat": 36.7378, "lng": -119.7871},
                "candidates": True,
            },
        )

        assert response.json()["candidates"][0]["distance_km"] == 0.0

    @pytest.mark.asyncio
    async def test_no_candidates_is_not_found(
        self, test_app_async_client: AsyncClient, install_service, provider_factory
    ) -> None:
        install_service([provider_factory(NominatimProvider, json_handler([]))])

        response = await test_app_async_client.post(
            GEOCODE_URL, json={"q": "Nowhere", "candidates": True}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "No candidates"

    @pytest.mark.asyncio
    async def test_nominatim_only_chain(
        self, test_app_async_client: AsyncClient, install_service, provider_factory
    ) -> None:
        payload = [
            nominatim_entry(
                "Town Hall, Glen Cove, New York, United States",
                "40.8621",
                "-73.6332",
                city="Glen Cove",
                state="New York",
            )
        ]
        install_service([provider_factory(NominatimProvider, json_handler(payload))])

        response = await test_app_async_client.post(
            GEOCODE_URL, json={"q": "Town Hall", "candidates": True}
        )

        candidate = response.json()["candidates"][0]
        assert candidate["provider"] == "nominatim"
        assert candidate["meta"]["regionCode"] == "NY"


class TestServiceAvailability:
    """The endpoint depends on the service built at startup."""

    @pytest.mark.asyncio
    async def test_missing_service_is_internal_error(
        self, test_app_async_client: AsyncClient
    ) -> None:
        """Without the lifespan having run there is no service."""
        response = await test_app_async_client.post(
            GEOCODE_URL, json={"q": "Town Hall"}
        )

        assert response.status_code == 500
        assert response.json()["error_type"] == "InternalError"
