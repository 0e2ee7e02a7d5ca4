"""Request and response models for the geocode endpoint."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from georesolve.geocoding.service import GeocodeRequest
from georesolve.geocoding.types import LocalityExpectation, Near


class NearPoint(BaseModel):
    """Bias point; ignored unless both values are finite and in range."""

    lat: Optional[float] = None
    lng: Optional[float] = None


class GeocodeRequestBody(BaseModel):
    """Inbound geocode request."""

    model_config = ConfigDict(extra="ignore")

    q: Optional[str] = Field(None, description="Free-text place description")
    near: Optional[NearPoint] = Field(
        None, description="Optional point used to prefer nearby results"
    )
    expectCity: Optional[str] = Field(None, description="Expected city")
    expectRegionCode: Optional[str] = Field(
        None, description="Expected region code (e.g., 'NY')"
    )
    expectState: Optional[str] = Field(
        None, description="Older name for expectRegionCode"
    )
    candidates: bool = Field(
        False, description="Return a ranked list instead of a single answer"
    )

    def to_request(self) -> GeocodeRequest:
        near = Near.from_values(self.near.lat, self.near.lng) if self.near else None
        return GeocodeRequest(
            q=self.q,
            near=near,
            expect=LocalityExpectation(
                city=self.expectCity,
                region_code=self.expectRegionCode or self.expectState,
            ),
            candidates=self.candidates,
        )


class LocalityMeta(BaseModel):
    """Normalized locality facts of a match."""

    city: Optional[str] = None
    region: Optional[str] = None
    regionCode: Optional[str] = None
    countryCode: Optional[str] = None


class HitResponse(BaseModel):
    """Strict mode answer."""

    provider: str
    address_text: str
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    meta: LocalityMeta


class CandidateItem(BaseModel):
    """One ranked candidate."""

    provider: str
    label: str
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    score: float
    meta: LocalityMeta
    distance_km: Optional[float] = Field(
        None, description="Distance from the bias point, when one was given"
    )


class CandidatesResponse(BaseModel):
    """Candidate mode answer."""

    candidates: List[CandidateItem]


class ErrorResponse(BaseModel):
    """Error body produced by the error handling middleware."""

    error: str
    error_type: str
    status_code: int
    correlation_id: str = "unknown"
