"""
Tests for the interview analysis strategies.
"""
import json
import random

import pytest

from app.core.errors import ProviderError, ProviderTimeoutError
from app.services.analysis_service import (
    AnalysisContext,
    DelegatedAnalysis,
    SynthesizedAnalysis,
    get_analysis_strategy,
    quality_label,
    build_analysis_prompt,
    OVERALL_SCORE_RANGE,
    SENTIMENT_RANGES,
    FILLER_WORDS_RANGE,
    AVERAGE_RESPONSE_TIME_RANGE,
    SUB_SCORE_JITTER,
    DELEGATED_FILLER_WORDS,
)

CONTEXT = AnalysisContext(
    duration=40,
    job_title="Backend Engineer",
    candidate_name="Asha Rao",
    questions=["Explain database indexing", "Tell me about a conflict"],
    recruiter_notes="Calm under pressure",
)


@pytest.mark.parametrize("seed", range(25))
def test_synthesized_values_stay_in_fixed_ranges(seed):
    analysis = SynthesizedAnalysis(random.Random(seed)).generate(CONTEXT)
    overall = analysis.overall_score

    assert OVERALL_SCORE_RANGE[0] <= overall <= OVERALL_SCORE_RANGE[1]
    for score in (
        analysis.communication_score,
        analysis.technical_score,
        analysis.confidence_score,
        analysis.eye_contact.score,
        analysis.body_language.score,
        analysis.speaking_pace.score,
    ):
        assert abs(score - overall) <= SUB_SCORE_JITTER
        assert 0 <= score <= 100

    for key, (low, high) in SENTIMENT_RANGES.items():
        assert low <= getattr(analysis.sentiment_analysis, key) <= high
    assert FILLER_WORDS_RANGE[0] <= analysis.filler_words_count <= FILLER_WORDS_RANGE[1]
    assert AVERAGE_RESPONSE_TIME_RANGE[0] <= analysis.average_response_time <= AVERAGE_RESPONSE_TIME_RANGE[1]
    assert analysis.total_speaking_time == 40 * 60 * 0.6
    assert analysis.response_quality == quality_label(overall)


def test_synthesized_is_reproducible_with_seeded_rng():
    first = SynthesizedAnalysis(random.Random(7)).generate(CONTEXT)
    second = SynthesizedAnalysis(random.Random(7)).generate(CONTEXT)
    assert first == second


@pytest.mark.parametrize("score,label", [
    (95, "excellent"),
    (85, "excellent"),
    (84.9, "good"),
    (75, "good"),
    (74, "average"),
    (10, "average"),
])
def test_quality_thresholds(score, label):
    assert quality_label(score) == label


def test_prompt_includes_interview_context():
    prompt = build_analysis_prompt(CONTEXT)
    assert "Backend Engineer" in prompt
    assert "Asha Rao" in prompt
    assert "40 minutes" in prompt
    assert "- Explain database indexing" in prompt
    assert "Calm under pressure" in prompt


def test_delegated_uses_provider_scores(fake_llm):
    reply = "Here is the report:\n```json\n" + json.dumps({
        "overall_score": 88,
        "communication_score": 90,
        "technical_score": 86,
        "confidence_score": 80,
        "sentiment_analysis": {"positive": 0.7, "neutral": 0.25, "negative": 0.05},
        "strengths": ["Depth in SQL"],
        "weaknesses": ["Rushed answers"],
        "recommendations": ["Slow down"],
        "ai_summary": "Strong candidate",
        "detailed_feedback": "Solid fundamentals",
    }) + "\n```"
    provider = fake_llm(replies=[reply])

    analysis = DelegatedAnalysis(provider).generate(CONTEXT)

    assert analysis.overall_score == 88
    assert analysis.response_quality == "excellent"
    assert analysis.eye_contact.score == 80
    assert analysis.speaking_pace.score == 90
    assert analysis.filler_words_count == DELEGATED_FILLER_WORDS
    assert analysis.strengths == ["Depth in SQL"]
    assert len(provider.calls) == 1
    assert provider.calls[0]["messages"][0]["role"] == "system"


@pytest.mark.parametrize("replies,error", [
    (None, ProviderError("upstream 500", status=500)),
    (None, ProviderTimeoutError("timed out")),
    (["I cannot score this interview."], None),
    (['{"overall_score": 140}'], None),
    (['{"communication_score": 80}'], None),
    (['{"overall_score": "high"}'], None),
])
def test_delegated_falls_back_to_synthesis(fake_llm, replies, error):
    provider = fake_llm(replies=replies, error=error)
    fallback = SynthesizedAnalysis(random.Random(3))
    expected = SynthesizedAnalysis(random.Random(3)).generate(CONTEXT)

    analysis = DelegatedAnalysis(provider, fallback=fallback).generate(CONTEXT)

    assert analysis == expected


def test_delegated_without_provider_synthesizes():
    analysis = DelegatedAnalysis(None, fallback=SynthesizedAnalysis(random.Random(1))).generate(CONTEXT)
    assert OVERALL_SCORE_RANGE[0] <= analysis.overall_score <= OVERALL_SCORE_RANGE[1]


def test_strategy_selection():
    assert isinstance(get_analysis_strategy(strategy="synthesized"), SynthesizedAnalysis)
    assert isinstance(get_analysis_strategy(strategy="DELEGATED"), DelegatedAnalysis)
    assert isinstance(get_analysis_strategy(strategy="something-else"), SynthesizedAnalysis)
