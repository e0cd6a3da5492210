"""Project details extraction using LLMs."""

from dataclasses import dataclass
from typing import Protocol

from photoflow.domain.extraction import ProjectDetails

EXTRACTION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "clientName": {
            "type": "string",
            "description": "The name of the client for the photo project.",
        },
        "date": {
            "type": "string",
            "description": "The date of the photo shoot, as YYYY-MM-DD when known.",
        },
        "location": {
            "type": "string",
            "description": "The location of the photo shoot.",
        },
        "photographer": {
            "type": "string",
            "description": "The name of the assigned photographer.",
        },
    },
    "required": ["clientName", "date", "location", "photographer"],
    "additionalProperties": False,
}

EXTRACTION_PROMPT = (
    "You are an expert project manager specializing in photography projects. "
    "Extract the client name, date, location and photographer from the "
    "project description below. Use an empty string for anything not "
    "mentioned.\n\nDescription: {description}"
)


class ExtractionClient(Protocol):
    """Interface for LLM structured extraction."""

    async def extract(
        self, *, model: str, prompt: str, schema: dict[str, object]
    ) -> dict[str, object]:
        """Return structured data matching the schema."""


@dataclass
class ExtractionService:
    """Service that prompts for project details and validates the result."""

    client: ExtractionClient
    model: str

    async def extract(self, description: str) -> ProjectDetails:
        """Extract suggested project fields from a description."""
        raw = await self.client.extract(
            model=self.model,
            prompt=EXTRACTION_PROMPT.format(description=description),
            schema=EXTRACTION_SCHEMA,
        )
        return ProjectDetails.model_validate(raw)
