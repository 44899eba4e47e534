import json
import logging
from typing import Any, Dict, Optional, Union

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from . import config
from .errors import DecodeError, NetworkError
from .models import DiagnosisResult
from .prompts import Language, build_request, build_response_format

logger = logging.getLogger("leafdoctor.diagnosis")


def _extract_json(text: str) -> Dict[str, Any]:
    """
    JSON extraction:
    - pure JSON -> parse directly
    - else the first {...} block (models sometimes wrap it in a code fence)
    """
    text = (text or "").strip()
    if not text:
        raise DecodeError("empty completion")
    try:
        data = json.loads(text)
    except ValueError:
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end <= start:
            raise DecodeError("completion is not JSON") from None
        try:
            data = json.loads(text[start:end + 1])
        except ValueError as e:
            raise DecodeError(f"completion is not JSON: {e}") from None

    if not isinstance(data, dict):
        raise DecodeError(f"expected a JSON object, got {type(data).__name__}")
    return data


def decode_diagnosis(text: str) -> DiagnosisResult:
    data = _extract_json(text)
    try:
        return DiagnosisResult.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise DecodeError(f"diagnosis does not match schema ({fields})") from e


class DiagnosisClient:
    """Sends one leaf photo to the vision model and returns a typed diagnosis."""

    def __init__(self, client: AsyncOpenAI, model: Optional[str] = None):
        self.client = client
        self.model = model or config.MODEL_NAME

    async def diagnose(
        self,
        image: bytes,
        language: Union[str, Language],
        mime_type: str = "image/jpeg",
    ) -> DiagnosisResult:
        if not image:
            raise ValueError("image must not be empty")

        request = build_request(image, mime_type, language)

        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": request.system_prompt},
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": request.user_prompt},
                            {"type": "image_url", "image_url": {"url": request.image_data_url}},
                        ],
                    },
                ],
                response_format=build_response_format(),
                temperature=0.2,
            )
        except openai.APIStatusError as e:
            raise NetworkError(f"diagnosis service returned {e.status_code}") from e
        except openai.APIConnectionError as e:
            raise NetworkError(f"diagnosis service unreachable: {e}") from e

        if not resp.choices:
            raise DecodeError("completion has no choices")
        content = resp.choices[0].message.content or ""

        result = decode_diagnosis(content)
        logger.info(
            "diagnosed %s / %s (%s%%, %s) lang=%s",
            result.plant_name,
            result.disease_name,
            result.confidence,
            result.severity,
            request.language.value,
        )
        return result
