"""Tests for project details extraction."""

import asyncio
from datetime import date

import pytest
from pydantic import ValidationError

from photoflow.domain.extraction import ProjectDetails
from photoflow.services.extraction import EXTRACTION_SCHEMA, ExtractionService
from tests.conftest import FakeExtractionClient


def test_extraction_returns_structured_details() -> None:
    client = FakeExtractionClient()
    service = ExtractionService(client=client, model="gpt-5.2")

    details = asyncio.run(service.extract("Smith wedding in Lisbon on June 1st"))

    assert details.client_name == "Smith Wedding"
    assert details.parsed_date() == date(2024, 6, 1)
    call = client.calls[0]
    assert call["model"] == "gpt-5.2"
    assert call["schema"] is EXTRACTION_SCHEMA
    assert "Smith wedding in Lisbon" in str(call["prompt"])


def test_extraction_rejects_incomplete_payload() -> None:
    client = FakeExtractionClient(response={"clientName": "Smith"})
    service = ExtractionService(client=client, model="gpt-5.2")

    with pytest.raises(ValidationError):
        asyncio.run(service.extract("Smith wedding"))


def test_unparseable_date_is_none() -> None:
    details = ProjectDetails(
        client_name="Smith", date="next Saturday", location="", photographer=""
    )

    assert details.parsed_date() is None
