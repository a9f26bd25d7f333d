"""Tests for the CV analysis gateway."""

import base64
import json

import httpx
import pytest

from orca.core.ai_client import AIClient, SessionError
from orca.core.cv_analyzer import FALLBACK_EXPERIENCES, FALLBACK_SKILLS, CVAnalyzer
from tests.helpers import make_document


def analyzer_replying(settings, content, seen=None) -> CVAnalyzer:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})

    return CVAnalyzer(AIClient(settings, transport=httpx.MockTransport(handler)))


async def test_valid_analysis_is_returned(settings):
    seen = []
    content = json.dumps({
        "technical_skills": ["Python", "SQL", "Docker"],
        "experiences": ["Thesis project", "Hackathon", "Internship"],
    })
    analyzer = analyzer_replying(settings, content, seen)

    analysis = await analyzer.analyze(make_document(), "Data Analyst", 3, 3)

    assert analysis.technical_skills == ["Python", "SQL", "Docker"]
    assert analysis.experiences == ["Thesis project", "Hackathon", "Internship"]
    assert len(seen) == 1
    assert seen[0].url.path == settings.analysis_endpoint


async def test_request_carries_document_and_counts(settings):
    seen = []
    analyzer = analyzer_replying(settings, "{}", seen)
    document = make_document()

    await analyzer.analyze(document, "Backend Developer", 5, 4)

    message = json.loads(seen[0].content)["messages"][0]
    image_part, text_part = message["content"]
    encoded = base64.b64encode(document.content).decode("ascii")
    assert image_part["image_url"]["url"] == f"data:application/pdf;base64,{encoded}"
    assert "Backend Developer" in text_part["text"]
    assert "exactly 5 key technical skills" in text_part["text"]
    assert "exactly 4 key experiences" in text_part["text"]


async def test_fenced_json_is_accepted(settings):
    content = '```json\n{"technical_skills": ["Go"], "experiences": ["Club lead", "Internship"]}\n```'
    analyzer = analyzer_replying(settings, content)

    analysis = await analyzer.analyze(make_document(), "Developer", 1, 2)

    assert analysis.technical_skills == ["Go"]


@pytest.mark.parametrize(
    "content",
    [
        "I could not read this CV.",
        '{"technical_skills": ["Go"]}',
        '{"technical_skills": ["Go", "Rust"], "experiences": ["Internship"]}',
        '{"technical_skills": "Go", "experiences": []}',
        "[]",
        "null",
    ],
)
async def test_unusable_analysis_falls_back_to_requested_sizes(settings, content):
    analyzer = analyzer_replying(settings, content)

    analysis = await analyzer.analyze(make_document(), "Developer", 3, 2)

    assert analysis.technical_skills == FALLBACK_SKILLS[:3]
    assert analysis.experiences == FALLBACK_EXPERIENCES[:2]


@pytest.mark.parametrize("technical, behavioral", [(0, 0), (1, 2), (5, 5), (7, 4)])
async def test_fallback_always_has_requested_lengths(settings, technical, behavioral):
    analyzer = analyzer_replying(settings, "garbage")

    analysis = await analyzer.analyze(make_document(), "Developer", technical, behavioral)

    assert len(analysis.technical_skills) == technical
    assert len(analysis.experiences) == behavioral


async def test_deeply_nested_answer_falls_back(settings):
    analyzer = analyzer_replying(settings, "[" * 100000 + "]" * 100000)

    analysis = await analyzer.analyze(make_document(), "Developer", 2, 3)

    assert analysis.technical_skills == FALLBACK_SKILLS[:2]
    assert analysis.experiences == FALLBACK_EXPERIENCES[:3]


async def test_remote_failure_propagates(settings):
    analyzer = CVAnalyzer(
        AIClient(settings, transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    )
    with pytest.raises(SessionError):
        await analyzer.analyze(make_document(), "Developer", 3, 2)
