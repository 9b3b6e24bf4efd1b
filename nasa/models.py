"""
Typed views over the parts of NASA's payloads this service reads.

Upstream bodies are relayed verbatim; these models only give structure to the
fields the NEO/EPIC/rover helpers and the frontend actually consume. Every
model allows extra fields so unknown upstream data passes through untouched.
"""
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NasaModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class RoverCamera(NasaModel):
    name: str
    full_name: Optional[str] = None


class Rover(NasaModel):
    id: Optional[int] = None
    name: str
    status: Optional[str] = None
    landing_date: Optional[str] = None
    launch_date: Optional[str] = None
    max_sol: Optional[int] = None
    max_date: Optional[str] = None
    total_photos: Optional[int] = None
    cameras: List[RoverCamera] = Field(default_factory=list)


class RoverList(NasaModel):
    rovers: List[Rover] = Field(default_factory=list)


class DiameterRange(NasaModel):
    estimated_diameter_min: Optional[float] = None
    estimated_diameter_max: Optional[float] = None


class EstimatedDiameter(NasaModel):
    kilometers: Optional[DiameterRange] = None


class NearEarthObject(NasaModel):
    id: Optional[Union[str, int]] = None
    name: Optional[str] = None
    is_potentially_hazardous_asteroid: Optional[bool] = False
    estimated_diameter: Optional[EstimatedDiameter] = None

    def diameter_km(self) -> Optional[DiameterRange]:
        if self.estimated_diameter is None:
            return None
        return self.estimated_diameter.kilometers


class SummaryModel(BaseModel):
    """Models this service produces itself; serialised in camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DateRange(SummaryModel):
    start: str
    end: str


class AverageDiameter(SummaryModel):
    min: float = 0.0
    max: float = 0.0


class NeoSummary(SummaryModel):
    total_count: int = 0
    hazardous_count: int = 0
    date_range: DateRange
    average_diameter: AverageDiameter = Field(default_factory=AverageDiameter)
