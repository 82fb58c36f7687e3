import logging
from typing import List

from google import genai
from google.genai import types              # pydantic config classes

from embedbot.errors import GenerationFailed

from .prompt import build_priming_turns

logger = logging.getLogger(__name__)


class GenerationClient:
    """Single Gemini call per turn, authenticated with the caller's key.

    The key is only ever held for the duration of one call: a fresh client is
    built per request and nothing is cached or logged.
    """

    def __init__(self, model_id: str) -> None:
        self.model_id = model_id
        logger.info("Generation model: %s", self.model_id)

    def build_contents(self, grounding_prompt: str, message: str) -> List[types.Content]:
        turns = build_priming_turns(grounding_prompt) + [("user", message)]
        return [
            types.Content(role=role, parts=[types.Part(text=text)])
            for role, text in turns
        ]

    async def generate(self, api_key: str, grounding_prompt: str, message: str) -> str:
        contents = self.build_contents(grounding_prompt, message)
        try:
            client = genai.Client(api_key=api_key)
        except Exception as exc:
            logger.error("Gen AI client setup failed: %s", exc)
            raise GenerationFailed() from exc

        try:
            resp = await client.aio.models.generate_content(
                model=self.model_id,
                contents=contents,
            )
            text = resp.text
        except Exception as exc:
            logger.error("Gen AI error: %s", exc, exc_info=True)
            raise GenerationFailed() from exc
        finally:
            # release both connection pools
            await client.aio.aclose()
            client.close()

        if not text:
            logger.warning("Empty or filtered response from %s", self.model_id)
            raise GenerationFailed()
        return text
