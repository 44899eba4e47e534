import asyncio
import json

import pytest

from conftest import JPEG_BYTES, TOMATO, FakeOpenAI, completion, connection_error, status_error
from leafdoctor.diagnosis import DiagnosisClient, decode_diagnosis
from leafdoctor.errors import ConfigurationError, DecodeError, NetworkError


def diagnose(client, image=JPEG_BYTES, lang="en"):
    return asyncio.run(DiagnosisClient(client, model="test-model").diagnose(image, lang))


def test_schema_conformant_response_round_trips(tomato_json):
    client = FakeOpenAI(completion(tomato_json))
    result = diagnose(client)

    assert result.to_wire() == TOMATO
    assert result.plant_name == "Tomato"
    assert result.preventive_measures == ["a", "b", "c"]
    assert not result.is_healthy


def test_request_carries_image_prompt_and_schema(tomato_json):
    client = FakeOpenAI(completion(tomato_json))
    diagnose(client, lang="hi")

    assert len(client.calls) == 1
    call = client.calls[0]
    assert call["model"] == "test-model"
    assert call["response_format"]["json_schema"]["name"] == "plant_diagnosis"

    user = call["messages"][1]["content"]
    assert "Hindi" in user[0]["text"]
    assert user[1]["image_url"]["url"].startswith("data:image/jpeg;base64,")


@pytest.mark.parametrize("missing", list(TOMATO))
def test_missing_field_is_a_decode_error(missing):
    payload = {k: v for k, v in TOMATO.items() if k != missing}
    client = FakeOpenAI(completion(json.dumps(payload)))
    with pytest.raises(DecodeError):
        diagnose(client)


@pytest.mark.parametrize(
    "field, value",
    [
        ("confidence", "92"),
        ("confidence", True),
        ("confidence", 140),
        ("severity", "medium"),
        ("severity", "Critical"),
        ("preventiveMeasures", "water less"),
        ("plantName", 7),
        ("confidence", float("inf")),
        ("confidence", float("nan")),
    ],
)
def test_mistyped_field_is_a_decode_error(field, value):
    payload = dict(TOMATO, **{field: value})
    with pytest.raises(DecodeError):
        decode_diagnosis(json.dumps(payload))


@pytest.mark.parametrize("text", ["", "not json at all", "[1, 2, 3]", '{"plantName": "Tomato"'])
def test_unparseable_text_is_a_decode_error(text):
    with pytest.raises(DecodeError):
        decode_diagnosis(text)


def test_overflowing_confidence_is_a_decode_error():
    text = json.dumps(TOMATO).replace('"confidence": 92', '"confidence": 1e400')
    assert "1e400" in text
    with pytest.raises(DecodeError):
        decode_diagnosis(text)


def test_fenced_json_is_accepted():
    text = "```json\n" + json.dumps(TOMATO) + "\n```"
    assert decode_diagnosis(text).disease_name == "Early Blight"


def test_float_confidence_is_rounded():
    assert decode_diagnosis(json.dumps(dict(TOMATO, confidence=87.6))).confidence == 88


def test_healthy_plant():
    result = decode_diagnosis(json.dumps(dict(TOMATO, diseaseName="Healthy", severity="Low")))
    assert result.is_healthy


@pytest.mark.parametrize("error", [connection_error(), status_error(500), status_error(429)])
def test_transport_failures_are_network_errors(error):
    with pytest.raises(NetworkError):
        diagnose(FakeOpenAI(error))


def test_empty_image_is_rejected_before_any_request():
    client = FakeOpenAI(completion("{}"))
    with pytest.raises(ValueError):
        diagnose(client, image=b"")
    assert client.calls == []


def test_unsupported_language_is_rejected_before_any_request():
    client = FakeOpenAI(completion("{}"))
    with pytest.raises(ConfigurationError):
        diagnose(client, lang="fr")
    assert client.calls == []
