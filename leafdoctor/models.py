import base64
import math
import time
import uuid
from enum import Enum
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class Tab(str, Enum):
    SCAN = "scan"
    HISTORY = "history"
    WEATHER = "weather"
    EXTRAS = "extras"


Severity = Literal["Low", "Medium", "High"]


class DiagnosisResult(BaseModel):
    """
    Structured diagnosis as returned by the vision model.
    Field aliases are the wire names, attributes are snake_case.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    plant_name: StrictStr = Field(alias="plantName")
    disease_name: StrictStr = Field(alias="diseaseName")
    confidence: int = Field(ge=0, le=100)
    description: StrictStr
    organic_treatment: StrictStr = Field(alias="organicTreatment")
    chemical_treatment: StrictStr = Field(alias="chemicalTreatment")
    preventive_measures: List[StrictStr] = Field(alias="preventiveMeasures")
    severity: Severity

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence_number(cls, value: Any) -> int:
        # JSON "number": ints pass, floats are rounded, anything else is rejected
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("confidence must be a number")
        if not math.isfinite(value):
            raise ValueError("confidence must be finite")
        return int(round(value))

    @property
    def is_healthy(self) -> bool:
        return self.disease_name.strip().lower() == "healthy"

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ScanHistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    timestamp: int
    image_url: str = Field(alias="imageUrl")
    result: DiagnosisResult

    @classmethod
    def create(cls, image_url: str, result: DiagnosisResult) -> "ScanHistoryEntry":
        return cls(
            id=uuid.uuid4().hex,
            timestamp=now_ms(),
            image_url=image_url,
            result=result,
        )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def now_ms() -> int:
    return int(time.time() * 1000)


def to_data_url(data: bytes, mime_type: str = "image/jpeg") -> str:
    mime = mime_type or "image/jpeg"
    b64 = base64.b64encode(data).decode("utf-8")
    return f"data:{mime};base64,{b64}"
