"""
Pydantic models for property listing records.
"""
import math
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from property_mapper.core.utils.address import ADDRESS_NOT_FOUND, has_location


class PropertyRecord(BaseModel):
    """One property listing, keyed by its page URL."""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    url: str
    image: Optional[str] = None
    description: Optional[str] = None
    address: str = ADDRESS_NOT_FOUND
    location_field: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    postal_code: Optional[str] = Field(default=None, alias="zip_code")

    @model_validator(mode="after")
    def check_coordinates(self) -> "PropertyRecord":
        """Coordinates are both set to finite numbers or both null."""
        if (self.lat is None) != (self.lon is None):
            raise ValueError(
                f"partial coordinates for {self.url}: lat={self.lat}, lon={self.lon}"
            )
        if self.lat is not None and not (math.isfinite(self.lat) and math.isfinite(self.lon)):
            raise ValueError(f"non-finite coordinates for {self.url}")
        return self

    @property
    def coordinates(self) -> Optional[Tuple[float, float]]:
        if self.lat is None or self.lon is None:
            return None
        return self.lat, self.lon

    @property
    def has_coordinates(self) -> bool:
        return self.coordinates is not None

    @property
    def label(self) -> str:
        """Identifying text for log lines."""
        return self.title or self.url

    def set_coordinates(self, lat: float, lon: float) -> None:
        """Replace both coordinates at once."""
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise ValueError(f"non-finite coordinates: {lat}, {lon}")
        self.lat = float(lat)
        self.lon = float(lon)

    def apply_postal_code(self, postal_code: str) -> None:
        """
        Set the postal code and append it to the display address.

        The sentinel address is left as is, so it never reads as a location.
        """
        if self.postal_code:
            return
        self.postal_code = postal_code
        if has_location(self.address):
            self.address = f"{self.address} {postal_code}"

    def to_json_dict(self) -> dict:
        """Serialize with the persisted key names, keeping nulls."""
        return self.model_dump(mode="json", by_alias=True)
