"""Tests for run assembly on both assignment paths."""

import asyncio
from pathlib import Path

from duty_core.turn_order import LocalTurnOrderProvider
from duty_planner.config import OrderProviderConfig, RuntimeConfig
from duty_planner.order_client import HttpTurnOrderProvider
from duty_planner.planner import plan_run, select_order_provider

MEMBERS = [
    {"userId": "A", "historicalPoints": 10},
    {"userId": "B", "historicalPoints": 5, "availability": {"neverAvailable": [
        {"dayOfWeek": 1, "timeSlots": [{"start": "06:00", "end": "09:00"}]},
    ]}},
    {"userId": "C", "historicalPoints": 5, "limits": {"maxShiftsPerWeek": 1}},
]


def _runtime(bonus: float = -2.0, order_provider=None) -> RuntimeConfig:
    return RuntimeConfig(artifact_root=Path("."), preference_bonus=bonus, order_provider=order_provider)


def test_legacy_run_shape():
    run = asyncio.run(plan_run(["2024-01-02", "2024-01-01", "2024-01-03"], MEMBERS, "07:00", 10))
    assert run["run_id"].startswith("run-")
    assert run["strategy"] == "legacy_scoring"
    assert run["dates"] == ["2024-01-01", "2024-01-02", "2024-01-03"]
    assert run["range"] == {"from": "2024-01-01", "to": "2024-01-03"}
    assert run["assignments"]["2024-01-01"] == "C"
    assert run["assignments"]["2024-01-02"] == "B"
    assert [d["date"] for d in run["decisions"]] == run["dates"]
    assert run["decisions"][0]["blocked"] == {"B": "unavailable"}
    assert run["summary"]["total_assigned"] == len(run["assignments"])
    assert "notes" not in run
    assert [m["member_id"] for m in run["members"]] == ["A", "B", "C"]
    assert run["members"][2]["limits"]["max_shifts_per_week"] == 1


def test_runtime_bonus_used_when_config_has_none():
    members = [
        {"member_id": "keen", "historical_points": 11, "availability": {"preferredTimes": [
            {"dayOfWeek": 1, "timeSlots": [{"start": "06:00", "end": "08:00"}]},
        ]}},
        {"member_id": "other", "historical_points": 10},
    ]
    neutral = asyncio.run(plan_run(["2024-01-01"], members, "07:00", 10, runtime=_runtime(bonus=0)))
    assert neutral["assignments"] == {"2024-01-01": "other"}
    explicit = asyncio.run(plan_run(
        ["2024-01-01"], members, "07:00", 10, {"preferenceBonus": -5}, runtime=_runtime(bonus=0),
    ))
    assert explicit["assignments"] == {"2024-01-01": "keen"}


def test_ranked_run_uses_local_provider_and_notes_asymmetry():
    config = {"algorithm": "manual", "stableId": "s1", "organizationId": "o1"}
    run = asyncio.run(plan_run(["2024-01-01", "2024-01-02", "2024-01-03"], MEMBERS, "07:00", 10, config))
    assert run["strategy"] == "ranked_round_robin"
    # B is unavailable on Monday mornings but round robin does not re-check.
    assert run["assignments"] == {"2024-01-01": "A", "2024-01-02": "B", "2024-01-03": "C"}
    assert run["decisions"] == []
    assert run["notes"]


def test_empty_dates():
    run = asyncio.run(plan_run([], MEMBERS, "07:00", 10))
    assert run["range"] is None
    assert run["assignments"] == {}


def test_select_order_provider():
    assert isinstance(select_order_provider(None, []), LocalTurnOrderProvider)
    remote = OrderProviderConfig(base_url="https://ranking.example.org", api_key="", timeout_s=5, retries=1)
    assert isinstance(select_order_provider(_runtime(order_provider=remote), []), HttpTurnOrderProvider)
