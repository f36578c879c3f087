"""OpenAI Responses API client for recommendations and chat."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from diet_coach.domain.errors import GenerationFormatError, TransportError
from diet_coach.services.chat import ChatClient
from diet_coach.services.recommendations import TextGenerationClient


@dataclass
class OpenAITextClient(TextGenerationClient, ChatClient):
    """Text client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAITextClient":
        """Create an OpenAI text client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        request_payload: dict[str, object] = {
            "model": model,
            "instructions": instructions,
            "input": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "recommendation",
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        output_text = await self._create(request_payload)
        try:
            return json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise GenerationFormatError("OpenAI returned invalid JSON") from exc

    async def chat(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        messages: list[dict[str, str]],
    ) -> str:
        """Continue a conversation and return the assistant reply."""
        request_payload: dict[str, object] = {
            "model": model,
            "instructions": instructions,
            "input": messages,
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}
        return await self._create(request_payload)

    async def _create(self, request_payload: dict[str, object]) -> str:
        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise TransportError(f"OpenAI request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise GenerationFormatError("OpenAI returned an empty response")
        return output_text
