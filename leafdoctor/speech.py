import asyncio
import base64
import binascii
import logging
from typing import Callable, Optional, Set

import numpy as np
import openai
from openai import AsyncOpenAI

from . import config
from .errors import AudioDecodeError, NetworkError
from .models import DiagnosisResult

logger = logging.getLogger("leafdoctor.speech")

AudioSink = Callable[[np.ndarray, int], None]

READ_ALOUD_INSTRUCTION = (
    "You are a narrator. Read the user's text aloud exactly as written, "
    "in the language it is written in. Do not add, answer or summarize anything."
)


def speech_text(result: DiagnosisResult) -> str:
    return (
        f"{result.plant_name}. {result.disease_name}. {result.description}. "
        f"Treatment: {result.organic_treatment}"
    )


def decode_pcm16(payload: Optional[str]) -> np.ndarray:
    """
    Base64 payload -> float32 samples in [-1, 1].
    Payload is little-endian signed 16-bit PCM, mono.
    """
    if not payload:
        raise AudioDecodeError("missing audio payload")
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AudioDecodeError(f"audio payload is not base64: {e}") from None
    if not raw:
        raise AudioDecodeError("audio payload is empty")
    if len(raw) % 2:
        raise AudioDecodeError(f"odd number of PCM bytes ({len(raw)})")

    samples = np.frombuffer(raw, dtype="<i2")
    return samples.astype(np.float32) / 32768.0


def play_default(samples: np.ndarray, sample_rate: int) -> None:
    # sounddevice needs PortAudio at import time, so load it only when something is played
    import sounddevice as sd

    sd.play(samples, samplerate=sample_rate, blocking=False)


class SpeechPlayer:
    """
    Best-effort read-aloud of a diagnosis.
    speak() schedules a detached task and returns at once; errors end in the log.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model: Optional[str] = None,
        voice: Optional[str] = None,
        sink: Optional[AudioSink] = None,
        sample_rate: int = config.SPEECH_SAMPLE_RATE,
    ):
        self.client = client
        self.model = model or config.TTS_MODEL_NAME
        self.voice = voice or config.TTS_VOICE
        self.sink = sink or play_default
        self.sample_rate = sample_rate
        self._tasks: Set[asyncio.Task] = set()

    def speak(self, text: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.error("speak() called without a running event loop, skipping")
            return
        task = loop.create_task(self._speak(text))
        # keep a reference until done, the loop only holds weak ones
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @property
    def pending(self) -> Set[asyncio.Task]:
        return set(self._tasks)

    async def synthesize(self, text: str) -> str:
        """Request speech for text, return the base64 audio payload."""
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                modalities=["text", "audio"],
                audio={"voice": self.voice, "format": "pcm16"},
                messages=[
                    {"role": "system", "content": READ_ALOUD_INSTRUCTION},
                    {"role": "user", "content": text},
                ],
            )
        except openai.APIStatusError as e:
            raise NetworkError(f"speech service returned {e.status_code}") from e
        except openai.APIConnectionError as e:
            raise NetworkError(f"speech service unreachable: {e}") from e

        audio = resp.choices[0].message.audio if resp.choices else None
        if audio is None or not audio.data:
            raise AudioDecodeError("response carries no audio payload")
        return audio.data

    async def _speak(self, text: str) -> None:
        try:
            payload = await self.synthesize(text)
            samples = decode_pcm16(payload)
            self.sink(samples, self.sample_rate)
            logger.debug("playing %d samples at %d Hz", len(samples), self.sample_rate)
        except Exception:
            logger.exception("TTS failed")
