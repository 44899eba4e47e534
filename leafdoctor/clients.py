from openai import AsyncOpenAI

from . import config


def create_openai_client() -> AsyncOpenAI:
    """Shared async client for diagnosis, speech and insights calls."""
    return AsyncOpenAI(
        api_key=config.require_api_key(),
        timeout=config.OPENAI_TIMEOUT_SECONDS,
        max_retries=0,
    )
