import logging
from typing import Optional

import openai
from openai import AsyncOpenAI

from . import config
from .errors import NetworkError

logger = logging.getLogger("leafdoctor.insights")


def _insights_prompt(location: str) -> str:
    return (
        f"Give 2 agricultural shop recommendations and a fertilizer tip for someone in {location}. "
        "Return as JSON."
    )


class InsightsClient:
    """
    Advisory shop/fertilizer tips for the Extras tab.
    The text is passed through as-is, it is not validated.
    """

    def __init__(self, client: AsyncOpenAI, model: Optional[str] = None):
        self.client = client
        self.model = model or config.SEARCH_MODEL_NAME

    async def get_agri_insights(self, location: str) -> str:
        location = (location or "").strip()
        if not location:
            raise ValueError("location must not be empty")

        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": _insights_prompt(location)}],
                # search-enabled model, shop names come from live results
                web_search_options={},
            )
        except openai.APIStatusError as e:
            raise NetworkError(f"insights service returned {e.status_code}") from e
        except openai.APIConnectionError as e:
            raise NetworkError(f"insights service unreachable: {e}") from e

        text = resp.choices[0].message.content if resp.choices else None
        logger.info("insights for %r: %d chars", location, len(text or ""))
        return text or ""
