"""Advisory service producing short survey insights with OpenAI."""

import logging
from typing import Any, Dict, Optional

from openai import AsyncOpenAI

from survey_api.services.errors import AdvisoryError
from survey_api.services.storage_interfaces import AdvisoryService
from survey_api.utils.config import Settings, get_settings
from survey_api.utils.prompts import SYSTEM_MESSAGE, get_insight_prompt

logger = logging.getLogger(__name__)


class OpenAIAdvisoryService(AdvisoryService):
    """Generates a natural-language insight summary for a survey response."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.settings = settings or get_settings()
        self.client = client or AsyncOpenAI(
            api_key=self.settings.openai_api_key,
            timeout=self.settings.advisory_timeout_seconds,
            max_retries=0,
        )

    async def summarize(self, context: Dict[str, Any]) -> str:
        """Ask the model for insights; raises AdvisoryError on any failure."""
        prompt = get_insight_prompt(context)
        try:
            response = await self.client.chat.completions.create(
                model=self.settings.openai_model,
                messages=[
                    {"role": "system", "content": SYSTEM_MESSAGE},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.settings.openai_temperature,
                max_tokens=self.settings.openai_max_tokens,
            )
        except Exception as e:
            raise AdvisoryError(f"Insight generation failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise AdvisoryError("Insight generation returned no content")
        return content.strip()
