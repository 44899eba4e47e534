import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import httpx
import openai
import pytest

TOMATO = {
    "plantName": "Tomato",
    "diseaseName": "Early Blight",
    "confidence": 92,
    "description": "Fungal leaf spot with concentric rings.",
    "organicTreatment": "Remove infected leaves and spray neem oil.",
    "chemicalTreatment": "Chlorothalonil every 7-10 days.",
    "preventiveMeasures": ["a", "b", "c"],
    "severity": "Medium",
}

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-body"


def completion(content: Optional[str] = None, audio_data: Optional[str] = None) -> SimpleNamespace:
    audio = SimpleNamespace(data=audio_data) if audio_data is not None else None
    message = SimpleNamespace(content=content, audio=audio)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def connection_error() -> openai.APIConnectionError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return openai.APIConnectionError(request=request)


def status_error(code: int = 503) -> openai.APIStatusError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(code, request=request)
    return openai.APIStatusError("service unavailable", response=response, body=None)


class FakeCompletions:
    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, BaseException):
            raise item
        return item


class FakeOpenAI:
    """Stands in for AsyncOpenAI: only chat.completions.create is used."""

    def __init__(self, *responses: Any):
        self.chat = SimpleNamespace(completions=FakeCompletions(list(responses)))

    @property
    def calls(self) -> List[Dict[str, Any]]:
        return self.chat.completions.calls


class RecordingSink:
    def __init__(self):
        self.played = []

    def __call__(self, samples, sample_rate):
        self.played.append((samples, sample_rate))


@pytest.fixture
def tomato_json() -> str:
    return json.dumps(TOMATO)


@pytest.fixture
def fake_openai():
    return FakeOpenAI
