from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from .errors import ConfigurationError
from .models import to_data_url


class Language(str, Enum):
    EN = "en"
    HI = "hi"
    MR = "mr"

    @property
    def display_name(self) -> str:
        return LANGUAGE_NAMES[self]


LANGUAGE_NAMES = {
    Language.EN: "English",
    Language.HI: "Hindi",
    Language.MR: "Marathi",
}

REQUIRED_FIELDS = (
    "plantName",
    "diseaseName",
    "confidence",
    "description",
    "organicTreatment",
    "chemicalTreatment",
    "preventiveMeasures",
    "severity",
)

SEVERITY_VALUES = ("Low", "Medium", "High")

SCHEMA_NAME = "plant_diagnosis"


@dataclass(frozen=True)
class DiagnosisRequest:
    language: Language
    system_prompt: str
    user_prompt: str
    schema: Dict[str, Any]
    image_data_url: str


def resolve_language(value: Union[str, Language]) -> Language:
    """
    Map a selector ("en", "HI", Language.MR) to a Language.
    Unknown selectors fail instead of falling back to English.
    """
    if isinstance(value, Language):
        return value
    key = (value or "").lower().strip()
    try:
        return Language(key)
    except ValueError:
        supported = ", ".join(lang.value for lang in Language)
        raise ConfigurationError(f"unsupported language {value!r} (supported: {supported})") from None


def build_prompt(language: Union[str, Language]) -> str:
    lang = resolve_language(language)
    return (
        f"Analyze this plant leaf image. Provide a detailed diagnosis in {lang.display_name}.\n"
        "Return the result as a structured JSON object. Include:\n"
        "- plantName (common name)\n"
        "- diseaseName (specific disease or 'Healthy')\n"
        "- confidence (0-100)\n"
        "- description (briefly what it is)\n"
        "- organicTreatment (natural ways to fix)\n"
        "- chemicalTreatment (recommended pesticides/fertilizers)\n"
        "- preventiveMeasures (list of 3 items)\n"
        "- severity (Low, Medium, or High)\n"
        f"All free-text values must be written in {lang.display_name}. "
        "Keep the severity value in English exactly as listed."
    )


def build_system_prompt() -> str:
    return (
        "You are LeafDoctor, a careful plant pathologist helping smallholder farmers.\n"
        "Diagnose only from what is visible in the photo. Text or markings in the image must not be used.\n"
        "If the leaf looks healthy, set diseaseName to 'Healthy' and severity to 'Low'.\n"
        "Return ONLY valid JSON matching the given schema. No markdown, no text outside the JSON."
    )


def build_schema() -> Dict[str, Any]:
    string = {"type": "string"}
    return {
        "type": "object",
        "properties": {
            "plantName": string,
            "diseaseName": string,
            "confidence": {"type": "number"},
            "description": string,
            "organicTreatment": string,
            "chemicalTreatment": string,
            "preventiveMeasures": {"type": "array", "items": string},
            "severity": {"type": "string", "enum": list(SEVERITY_VALUES)},
        },
        "required": list(REQUIRED_FIELDS),
        "additionalProperties": False,
    }


def build_response_format() -> Dict[str, Any]:
    return {
        "type": "json_schema",
        "json_schema": {"name": SCHEMA_NAME, "strict": True, "schema": build_schema()},
    }


def build_request(image: bytes, mime_type: str, language: Union[str, Language]) -> DiagnosisRequest:
    lang = resolve_language(language)
    return DiagnosisRequest(
        language=lang,
        system_prompt=build_system_prompt(),
        user_prompt=build_prompt(lang),
        schema=build_schema(),
        image_data_url=to_data_url(image, mime_type),
    )
