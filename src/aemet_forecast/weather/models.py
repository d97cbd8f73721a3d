"""Data models for AEMET API payloads and the bundled municipality table."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

MUNICIPALITY_ID_PREFIX = "id"


class MunicipalityRecord(BaseModel):
    """One municipality from the bundled dataset.

    Every value is kept as the free-form string found in the source feed.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Bare INE code, e.g. '08019'")
    id_old: str = Field("", description="Legacy AEMET identifier")
    url: str = Field("", description="Municipality page slug on aemet.es")
    name: str = Field(..., alias="nombre", description="Display name")
    capital: str = Field("", description="Capital of the municipality")
    population: str = Field("", alias="num_hab", description="Number of inhabitants")
    region: str = Field("", alias="zona_comarcal", description="Regional zone code")
    featured: str = Field("", alias="destacada", description="Featured flag")
    altitude: str = Field("", alias="altitud", description="Altitude in metres")
    latitude: str = Field("", alias="latitud", description="Sexagesimal latitude")
    longitude: str = Field("", alias="longitud", description="Sexagesimal longitude")
    latitude_dec: str = Field("", alias="latitud_dec", description="Decimal latitude")
    longitude_dec: str = Field("", alias="longitud_dec", description="Decimal longitude")

    @field_validator("id")
    @classmethod
    def strip_id_prefix(cls, value: str) -> str:
        """Strip the literal legacy prefix so the id can be used as a path segment."""
        if value.startswith(MUNICIPALITY_ID_PREFIX):
            return value[len(MUNICIPALITY_ID_PREFIX):]
        return value

    @property
    def source_id(self) -> str:
        """Identifier in the dataset's prefixed convention, e.g. 'id08019'."""
        return f"{MUNICIPALITY_ID_PREFIX}{self.id}"


class StationInfo(BaseModel):
    """Weather station from the AEMET station inventory."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="indicativo", description="Climatological station code")
    name: str = Field(..., alias="nombre", description="Station name")
    province: str = Field("", alias="provincia", description="Province name")
    altitude: str = Field("", alias="altitud", description="Altitude in metres")
    latitude: str = Field("", alias="latitud", description="Sexagesimal latitude")
    longitude: str = Field("", alias="longitud", description="Sexagesimal longitude")
    synoptic_id: str = Field("", alias="indsinop", description="Synoptic indicator")


class RedirectEnvelope(BaseModel):
    """First-hop response: points at the URL holding the real payload."""
    datos: str = Field(..., description="Fully qualified URL of the payload")


class PrecipitationProbability(BaseModel):
    value: int = Field(0, description="Probability of precipitation in percent")
    period: str = Field("", alias="periodo")

    model_config = ConfigDict(populate_by_name=True)


class SnowLevel(BaseModel):
    value: str = Field("", description="Snow level in metres")
    period: str = Field("", alias="periodo")

    model_config = ConfigDict(populate_by_name=True)


class SkyCondition(BaseModel):
    value: str = Field("", description="Sky state code")
    period: str = Field("", alias="periodo")
    description: str = Field("", alias="descripcion", description="Sky state in Spanish")

    model_config = ConfigDict(populate_by_name=True)


class Wind(BaseModel):
    direction: str = Field("", alias="direccion", description="Compass direction code")
    speed: int = Field(0, alias="velocidad", description="Speed in km/h")
    period: str = Field("", alias="periodo")

    model_config = ConfigDict(populate_by_name=True)


class MaxGust(BaseModel):
    value: str = Field("", description="Maximum gust in km/h")
    period: str = Field("", alias="periodo")

    model_config = ConfigDict(populate_by_name=True)


class HourlyValue(BaseModel):
    value: int = Field(0)
    hour: int = Field(0, alias="hora")

    model_config = ConfigDict(populate_by_name=True)


class DailyRange(BaseModel):
    """Whole-day min/max plus the hourly breakdown."""
    max: int = Field(0, alias="maxima")
    min: int = Field(0, alias="minima")
    data: List[HourlyValue] = Field(default_factory=list, alias="dato")

    model_config = ConfigDict(populate_by_name=True)


class ForecastDay(BaseModel):
    """One day of a municipality forecast."""
    model_config = ConfigDict(populate_by_name=True)

    date: str = Field("", alias="fecha", description="Day in YYYY-MM-DDT00:00:00 format")
    precipitation_probability: List[PrecipitationProbability] = Field(
        default_factory=list, alias="probPrecipitacion"
    )
    snow_level: List[SnowLevel] = Field(default_factory=list, alias="cotaNieveProv")
    sky: List[SkyCondition] = Field(default_factory=list, alias="estadoCielo")
    wind: List[Wind] = Field(default_factory=list, alias="viento")
    max_gust: List[MaxGust] = Field(default_factory=list, alias="rachaMax")
    temperature: DailyRange = Field(default_factory=DailyRange, alias="temperatura")
    feels_like: DailyRange = Field(default_factory=DailyRange, alias="sensTermica")
    relative_humidity: DailyRange = Field(default_factory=DailyRange, alias="humedadRelativa")
    uv_max: int = Field(0, alias="uvMax")


class Prediction(BaseModel):
    days: List[ForecastDay] = Field(default_factory=list, alias="dia")

    model_config = ConfigDict(populate_by_name=True)


class Forecast(BaseModel):
    """Daily forecast for a municipality."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="nombre", description="Municipality name")
    province: str = Field("", alias="provincia", description="Province name")
    issued_at: str = Field("", alias="elaborado", description="Issue timestamp")
    prediction: Prediction = Field(default_factory=Prediction, alias="prediccion")
    id: int = Field(0, description="INE code as a number")
    version: float = Field(0.0)

    @property
    def days(self) -> List[ForecastDay]:
        return self.prediction.days
