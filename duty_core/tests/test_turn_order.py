"""Tests for the in-memory turn-order provider and turn payload parsing."""

from __future__ import annotations

import asyncio

from duty_core.turn_order import ComputedTurnOrder, LocalTurnOrderProvider, TurnHistory, TurnOrderRequest

NAMES = {"u1": "Sara", "u2": "Anna", "u3": "Pelle", "u4": "Bo"}


def _request(algorithm: str, member_ids: list[str]) -> TurnOrderRequest:
    return TurnOrderRequest(
        stable_id="s1",
        organization_id="o1",
        algorithm=algorithm,
        member_ids=member_ids,
        selection_start_date="2024-01-01",
        selection_end_date="2024-01-31",
    )


class TestLocalProvider:
    def test_manual_keeps_request_order(self):
        provider = LocalTurnOrderProvider(member_names=NAMES)
        result = provider.compute(_request("manual", ["u3", "u1", "u2"]))
        assert result.member_ids() == ["u3", "u1", "u2"]
        assert result.algorithm == "manual"

    def test_unknown_algorithm_is_manual(self):
        result = LocalTurnOrderProvider().compute(_request("lottery", ["u2", "u1"]))
        assert result.member_ids() == ["u2", "u1"]
        assert result.algorithm == "manual"

    def test_points_balance_lowest_first_then_name(self):
        provider = LocalTurnOrderProvider(member_names=NAMES, points_by_member={"u1": 5, "u2": 20, "u3": 5})
        result = provider.compute(_request("points_balance", ["u1", "u2", "u3", "u4"]))
        # u4 has no points (0); u1/u3 tie at 5 and sort by name (Pelle < Sara).
        assert result.member_ids() == ["u4", "u3", "u1", "u2"]
        assert result.metadata["member_points"]["u4"] == 0.0

    def test_fair_rotation_without_history_is_alphabetical(self):
        provider = LocalTurnOrderProvider(member_names=NAMES)
        result = provider.compute(_request("fair_rotation", ["u1", "u2", "u3", "u4"]))
        assert result.member_ids() == ["u2", "u4", "u3", "u1"]

    def test_fair_rotation_shifts_previous_order(self):
        history = TurnHistory(process_id="p1", final_order=["u1", "u2", "u3"], process_name="Spring")
        provider = LocalTurnOrderProvider(member_names=NAMES, history=history)
        result = provider.compute(_request("fair_rotation", ["u1", "u2", "u3"]))
        assert result.member_ids() == ["u2", "u3", "u1"]
        assert result.metadata["previous_process_id"] == "p1"

    def test_fair_rotation_drops_removed_and_appends_new(self):
        history = TurnHistory(process_id="p1", final_order=["u1", "u2", "u3"])
        provider = LocalTurnOrderProvider(member_names=NAMES, history=history)
        result = provider.compute(_request("fair_rotation", ["u1", "u3", "u4"]))
        assert result.member_ids() == ["u3", "u1", "u4"]

    def test_quota_based_reverses_history_and_sets_quota(self):
        history = TurnHistory(process_id="p1", final_order=["u1", "u2", "u3"])
        provider = LocalTurnOrderProvider(member_names=NAMES, history=history, available_points=100)
        result = provider.compute(_request("quota_based", ["u1", "u2", "u3"]))
        assert result.member_ids() == ["u3", "u2", "u1"]
        assert result.metadata["quota_per_member"] == 33.3

    def test_async_contract(self):
        provider = LocalTurnOrderProvider(member_names=NAMES)
        result = asyncio.run(provider.compute_turn_order(_request("manual", ["u1"])))
        assert result.member_ids() == ["u1"]

    def test_duplicate_ids_collapse(self):
        result = LocalTurnOrderProvider().compute(_request("manual", ["u1", "u1", "u2"]))
        assert result.member_ids() == ["u1", "u2"]


class TestPayloads:
    def test_request_payload_keys(self):
        payload = _request("points_balance", ["u1"]).to_payload()
        assert payload == {
            "stableId": "s1",
            "organizationId": "o1",
            "algorithm": "points_balance",
            "memberIds": ["u1"],
            "selectionStartDate": "2024-01-01",
            "selectionEndDate": "2024-01-31",
        }

    def test_computed_order_from_dict(self):
        payload = {
            "algorithm": "fair_rotation",
            "turns": [{"userId": "u2", "userName": "Anna"}, {"userName": "ghost"}, {"member_id": "u1", "order": 7}],
            "metadata": {"previousProcessId": "p0"},
        }
        computed = ComputedTurnOrder.from_dict(payload)
        assert computed.member_ids() == ["u2", "u1"]
        assert computed.turns[1].member_id is None
        assert computed.turns[2].order == 7
        assert computed.metadata == {"previousProcessId": "p0"}
