"""Turn-order contract and an in-memory ranking provider.

An order provider receives the candidate member ids and a selection window
and returns a deterministic priority ranking ("turns"). Remote providers
perform I/O, so the contract is async.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

ALGORITHMS = ("manual", "points_balance", "fair_rotation", "quota_based")


@dataclass(frozen=True)
class TurnOrderRequest:
    stable_id: str
    organization_id: str
    algorithm: str
    member_ids: list[str]
    selection_start_date: str
    selection_end_date: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "stableId": self.stable_id,
            "organizationId": self.organization_id,
            "algorithm": self.algorithm,
            "memberIds": list(self.member_ids),
            "selectionStartDate": self.selection_start_date,
            "selectionEndDate": self.selection_end_date,
        }


@dataclass(frozen=True)
class Turn:
    member_id: str | None
    name: str = ""
    order: int = 0

    @classmethod
    def from_dict(cls, row: Mapping[str, Any], default_order: int = 0) -> Turn:
        member_id = row.get("member_id") or row.get("userId")
        order = row.get("order")
        return cls(
            member_id=str(member_id) if member_id else None,
            name=str(row.get("name") or row.get("userName") or ""),
            order=int(order) if order is not None else default_order,
        )


@dataclass
class ComputedTurnOrder:
    turns: list[Turn]
    algorithm: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def member_ids(self) -> list[str]:
        """Ranked member ids, dropping turns that carry no id."""
        return [t.member_id for t in self.turns if t.member_id]

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> ComputedTurnOrder:
        turns = [Turn.from_dict(row, i) for i, row in enumerate(payload.get("turns") or [])]
        return cls(
            turns=turns,
            algorithm=str(payload.get("algorithm") or "manual"),
            metadata=dict(payload.get("metadata") or {}),
        )


class OrderProvider(Protocol):
    async def compute_turn_order(self, request: TurnOrderRequest) -> ComputedTurnOrder: ...


@dataclass(frozen=True)
class TurnHistory:
    """Final turn order of the last completed selection round."""

    process_id: str
    final_order: list[str]
    process_name: str = ""


class LocalTurnOrderProvider:
    """Rank members from data already in memory.

    Supported algorithms:
      - manual:         members in the order requested
      - points_balance: fewest accumulated points first, then by name
      - fair_rotation:  previous order shifted by one (first goes last)
      - quota_based:    previous order reversed, with a per-member points quota

    Members missing from the history are appended by name; members no
    longer requested are dropped. Without history, rotation and quota
    algorithms fall back to alphabetical order.
    """

    def __init__(
        self,
        *,
        member_names: Mapping[str, str] | None = None,
        history: TurnHistory | None = None,
        points_by_member: Mapping[str, float] | None = None,
        available_points: float = 0.0,
    ):
        self.member_names = dict(member_names or {})
        self.history = history
        self.points_by_member = dict(points_by_member or {})
        self.available_points = float(available_points)

    async def compute_turn_order(self, request: TurnOrderRequest) -> ComputedTurnOrder:
        return self.compute(request)

    def compute(self, request: TurnOrderRequest) -> ComputedTurnOrder:
        ids = list(dict.fromkeys(request.member_ids))
        algorithm = request.algorithm

        if algorithm == "points_balance":
            points = {mid: float(self.points_by_member.get(mid, 0.0)) for mid in ids}
            ordered = sorted(ids, key=lambda mid: (points[mid], self._name_key(mid)))
            return self._result(ordered, algorithm, {"member_points": points})

        if algorithm == "fair_rotation":
            metadata = self._history_metadata()
            if self.history and self.history.final_order:
                last = list(self.history.final_order)
                ordered = self._merge_with_history(last[1:] + last[:1], ids)
            else:
                ordered = self._alphabetical(ids)
            return self._result(ordered, algorithm, metadata)

        if algorithm == "quota_based":
            metadata = self._history_metadata()
            if self.history and self.history.final_order:
                ordered = self._merge_with_history(list(reversed(self.history.final_order)), ids)
            else:
                ordered = self._alphabetical(ids)
            quota = round(self.available_points / len(ids), 1) if ids else 0.0
            metadata.update({"quota_per_member": quota, "total_available_points": self.available_points})
            return self._result(ordered, algorithm, metadata)

        return self._result(ids, "manual", {})

    def _name_key(self, member_id: str) -> tuple[str, str]:
        return (self.member_names.get(member_id, member_id).casefold(), member_id)

    def _alphabetical(self, ids: Sequence[str]) -> list[str]:
        return sorted(ids, key=self._name_key)

    def _merge_with_history(self, previous: Sequence[str], ids: Sequence[str]) -> list[str]:
        wanted = set(ids)
        ordered: list[str] = []
        for mid in previous:
            if mid in wanted and mid not in ordered:
                ordered.append(mid)
        remaining = [mid for mid in ids if mid not in ordered]
        return ordered + self._alphabetical(remaining)

    def _history_metadata(self) -> dict[str, Any]:
        if not self.history:
            return {}
        return {
            "previous_process_id": self.history.process_id,
            "previous_process_name": self.history.process_name,
        }

    def _result(self, ordered: Sequence[str], algorithm: str, metadata: dict[str, Any]) -> ComputedTurnOrder:
        turns = [Turn(member_id=mid, name=self.member_names.get(mid, ""), order=i) for i, mid in enumerate(ordered)]
        return ComputedTurnOrder(turns=turns, algorithm=algorithm, metadata=metadata)
