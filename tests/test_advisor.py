"""
Tests for the AI advisor.

HTTP calls are mocked with respx; no request leaves the process.
"""

import json

import httpx
import pytest
import respx

from cloudinventory.advisor.client import (
    EMPTY_ANSWER_MESSAGE,
    FAILURE_MESSAGE,
    MISSING_KEY_MESSAGE,
    AdvisorClient,
)
from cloudinventory.advisor.summary import build_inventory_summary, build_prompt
from cloudinventory.core.exceptions import AdvisorException

BASE_URL = "https://advisor.test/v1beta"
ENDPOINT = f"{BASE_URL}/models/gemini-3-flash-preview:generateContent"


def _config(**overrides):
    config = {"api_key": "test-key", "base_url": BASE_URL, "retry_backoff_factor": 0}
    config.update(overrides)
    return config


def _answer(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_summary_overview(reference_inventory):
    summary = build_inventory_summary(reference_inventory)

    assert summary["overview"] == {
        "totalMonthlyCost": pytest.approx(2552.95),
        "totalResourceCount": 8,
        "untaggedResourceCount": 1,
        "highRiskCount": 3,
    }
    assert [f["id"] for f in summary["complianceFindings"]] == [
        "s3-legacy-logs", "vm-jenkins-build", "aks-cluster-dev",
    ]


def test_summary_optimization_insights(reference_inventory):
    insights = build_inventory_summary(reference_inventory)["optimizationInsights"]

    assert insights["stoppedResources"]["count"] == 0
    ri = insights["reservedInstanceOpportunities"]
    assert ri["eligibleResourceCount"] == 3
    assert ri["monthlyEligibleCost"] == pytest.approx(945.5)
    assert not ri["description"].startswith("High potential")
    assert [r["name"] for r in insights["topExpensiveResources"]] == [
        "company-legacy-logs-archive",
        "customer-records-primary",
        "dev-k8s-cluster",
        "prod-api-cluster-01",
        "ci-cd-build-agent",
    ]


def test_summary_stopped_and_high_ri_potential(make_resource):
    resources = [
        make_resource(id="a", name="big-db", type="Database", costPerMonth=1500, metadata={"storageEncrypted": True}),
        make_resource(id="b", name="idle-vm", type="Compute Instance", status="Stopped", costPerMonth=80),
    ]

    insights = build_inventory_summary(resources)["optimizationInsights"]

    assert insights["stoppedResources"] == {
        "count": 1,
        "monthlyWastedCost": 80.0,
        "examples": ["idle-vm (Compute Instance)"],
    }
    assert insights["reservedInstanceOpportunities"]["description"].startswith("High potential")


def test_prompt_contains_question_and_summary(reference_inventory):
    prompt = build_prompt(reference_inventory, "Where am I wasting money?")

    assert "Senior Cloud Security Architect" in prompt
    assert "User Question: Where am I wasting money?" in prompt
    assert '"complianceFindings"' in prompt


@pytest.mark.asyncio
async def test_missing_api_key_short_circuits(reference_inventory):
    with respx.mock(assert_all_called=False) as mock:
        route = mock.post(ENDPOINT)
        async with AdvisorClient(_config(api_key=None)) as advisor:
            answer = await advisor.analyze_inventory(reference_inventory, "anything")

    assert answer == MISSING_KEY_MESSAGE
    assert not route.called


@pytest.mark.asyncio
@respx.mock
async def test_answer_text_is_returned(reference_inventory):
    route = respx.post(ENDPOINT).mock(return_value=httpx.Response(200, json=_answer("Close the bucket.")))

    async with AdvisorClient(_config()) as advisor:
        answer = await advisor.analyze_inventory(reference_inventory, "What is most urgent?")

    assert answer == "Close the bucket."
    request = route.calls.last.request
    assert request.headers["x-goog-api-key"] == "test-key"
    body = json.loads(request.content)
    assert "User Question: What is most urgent?" in body["contents"][0]["parts"][0]["text"]


@pytest.mark.asyncio
@respx.mock
async def test_empty_answer(reference_inventory):
    respx.post(ENDPOINT).mock(return_value=httpx.Response(200, json={"candidates": []}))

    async with AdvisorClient(_config()) as advisor:
        answer = await advisor.analyze_inventory(reference_inventory, "q")

    assert answer == EMPTY_ANSWER_MESSAGE


@pytest.mark.asyncio
@respx.mock
async def test_http_error_becomes_failure_message(reference_inventory):
    route = respx.post(ENDPOINT).mock(return_value=httpx.Response(500, json={"error": "boom"}))

    async with AdvisorClient(_config()) as advisor:
        answer = await advisor.analyze_inventory(reference_inventory, "q")

    assert answer == FAILURE_MESSAGE
    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_transport_errors_are_retried(reference_inventory):
    route = respx.post(ENDPOINT).mock(side_effect=httpx.ConnectError("connection refused"))

    async with AdvisorClient(_config(retry_attempts=3)) as advisor:
        answer = await advisor.analyze_inventory(reference_inventory, "q")

    assert answer == FAILURE_MESSAGE
    assert route.call_count == 3


@pytest.mark.asyncio
@respx.mock
async def test_transient_transport_error_recovers():
    respx.post(ENDPOINT).mock(side_effect=[
        httpx.ConnectError("flaky"),
        httpx.Response(200, json=_answer("ok")),
    ])

    async with AdvisorClient(_config()) as advisor:
        assert await advisor.generate("prompt") == "ok"


@pytest.mark.asyncio
async def test_generate_raises_without_key():
    advisor = AdvisorClient(_config(api_key=""))

    with pytest.raises(AdvisorException):
        await advisor.generate("prompt")


@pytest.mark.asyncio
async def test_health_check_and_endpoint():
    advisor = AdvisorClient(_config(model="custom-model"))

    assert advisor.endpoint == f"{BASE_URL}/models/custom-model:generateContent"
    assert await advisor.health_check() is False
    async with advisor:
        assert await advisor.health_check() is True
    assert not advisor.is_connected
