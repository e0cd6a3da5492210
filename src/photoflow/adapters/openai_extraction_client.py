"""OpenAI Responses API client for project details extraction."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from photoflow.services.extraction import ExtractionClient


@dataclass
class OpenAIExtractionClient(ExtractionClient):
    """Extraction client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIExtractionClient":
        """Create an OpenAI extraction client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def extract(
        self, *, model: str, prompt: str, schema: dict[str, object]
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "project_details",
                    "strict": True,
                    "schema": schema,
                }
            },
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def close(self) -> None:
        """Release the underlying HTTP client."""
        await self.client.close()
