import asyncio
import copy
from typing import Any

import pytest

from certcheck.analysis.example_client_adapter import ExampleAnalysisClient
from certcheck.analysis.models import UploadedDocument


class FakeClock:
    """Stands in for asyncio.sleep: records each delay and advances virtual time."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def analysis_payload() -> dict[str, Any]:
    """A complete service response in the wrapped wire format."""
    payload = copy.deepcopy(ExampleAnalysisClient.DEFAULT_RESPONSE)
    payload["subcast_legal_analysis"]["supporting_precedents"] = [  # type: ignore[index]
        {
            "case_title": "Sunita Mahadev Koli vs State of Maharashtra",
            "court": "Supreme Court of India",
            "date": "2018-03-14",
            "document_url": "https://example.org/cases/sunita-koli",
            "relevance_score": 1.7,
            "key_similarities": ["Parental certificate on record", "Born in Thane district"],
            "key_differences": None,
            "outcome": "UPHELD - Certificate validated",
        }
    ]
    return payload


@pytest.fixture()
def draft_document() -> UploadedDocument:
    return UploadedDocument(name="caste_certificate_draft.docx", content=b"PK\x03\x04draft")
