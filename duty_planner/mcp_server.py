"""duty-planner MCP server.

Exposes tools for fairness-based duty assignment (via duty_core), manual
assignment validation, run persistence, and run summaries.
"""
from __future__ import annotations

import argparse
import logging
import os
from typing import Any

from mcp.server.fastmcp import FastMCP

from duty_core.constraints import validate_manual_assignment
from duty_core.io import load_dates, load_roster
from duty_core.models import MemberForAssignment, TrackingState, members_from_dicts
from duty_core.summary import summarize_assignments

from .config import load_env, runtime_config
from .planner import plan_run
from .storage import list_runs as _list_runs
from .storage import load_run as _load_run
from .storage import save_run as _save_run

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "duty-planner",
    host=os.getenv("HOST", "127.0.0.1"),
    port=int(os.getenv("PORT", "8000")),
    instructions=(
        "Fair assignment of recurring stable duties to members. "
        "Assigns dates greedily by historical and session points, respecting "
        "availability exclusions and weekly/monthly caps, or distributes dates "
        "over a ranked turn order when a ranking algorithm is configured. "
        "Dates missing from a result need manual assignment."
    ),
)

_ENV_FILE: str | None = None


def _runtime():
    load_env(_ENV_FILE or os.getenv("DUTY_PLANNER_ENV_FILE"))
    return runtime_config()


def _run_summary(run: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in run.items() if k not in ("decisions", "members")}


def _stored_roster(run: dict[str, Any]) -> list[MemberForAssignment]:
    # Runs saved without member records only carry ids.
    rows = run.get("members") or [{"member_id": mid} for mid in run.get("member_ids", [])]
    return members_from_dicts(rows)


# -- Assignment engine --

@mcp.tool()
async def assign_duties(
    dates: list[str],
    members: list[dict[str, Any]],
    start_time: str,
    points_value: float,
    config: dict[str, Any] | None = None,
    save: bool = True,
) -> dict[str, Any]:
    """Assign each date to at most one member.

    `members` are roster records (member_id, historical_points, availability,
    limits). `config` may carry algorithm/stableId/organizationId/startDate/
    endDate for the ranked path, or preferenceBonus for the default scorer.
    Returns the run without its per-date decision trace.
    """
    runtime = _runtime()
    run = await plan_run(dates, members, start_time, points_value, config, runtime=runtime)
    if save:
        _save_run(runtime.artifact_root, run)
    return _run_summary(run)


@mcp.tool()
async def assign_duties_from_files(
    roster_path: str,
    dates_path: str,
    start_time: str,
    points_value: float,
    config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Same as assign_duties, reading the roster and dates from JSON/CSV files."""
    runtime = _runtime()
    run = await plan_run(
        load_dates(dates_path),
        load_roster(roster_path),
        start_time,
        points_value,
        config,
        runtime=runtime,
    )
    _save_run(runtime.artifact_root, run)
    return _run_summary(run)


@mcp.tool()
def validate_assignment(
    member: dict[str, Any],
    date: str,
    start_time: str,
    shifts_this_week: int | None = None,
    shifts_this_month: int | None = None,
) -> dict[str, Any]:
    """Check whether a manual assignment respects availability and limits."""
    tracking = None
    if shifts_this_week is not None or shifts_this_month is not None:
        tracking = TrackingState(
            shifts_this_week=shifts_this_week or 0,
            shifts_this_month=shifts_this_month or 0,
        )
    reason = validate_manual_assignment(MemberForAssignment.from_dict(member), date, start_time, tracking)
    return {"allowed": reason is None, "reason": reason}


# -- Run CRUD --

@mcp.tool()
def list_runs(limit: int = 20) -> list[dict[str, Any]]:
    """List local run manifests, newest first."""
    return _list_runs(_runtime().artifact_root, limit=limit)


@mcp.tool()
def load_run(run_id: str | None = None) -> dict[str, Any]:
    """Load a full run JSON by ID (or latest if omitted), including decisions."""
    return _load_run(_runtime().artifact_root, run_id=run_id)


@mcp.tool()
def explain_date(date: str, run_id: str | None = None) -> dict[str, Any]:
    """Candidate scores, blocked members and outcome for one date of a run."""
    run = _load_run(_runtime().artifact_root, run_id=run_id)
    for decision in run.get("decisions", []):
        if decision.get("date") == date:
            return decision
    raise KeyError(f"no decision recorded for {date} in run {run.get('run_id')}")


@mcp.tool()
def summarize_run(run_id: str | None = None) -> dict[str, Any]:
    """Recompute distribution and fairness metrics for a stored run over its full roster."""
    run = _load_run(_runtime().artifact_root, run_id=run_id)
    return summarize_assignments(
        run.get("assignments", {}),
        float(run.get("points_value") or 0),
        members=_stored_roster(run),
        requested_dates=run.get("dates", []),
    )


# -- Server entrypoints --

async def _run_http() -> None:
    import uvicorn
    from starlette.middleware.base import BaseHTTPMiddleware
    from starlette.responses import JSONResponse
    from starlette.routing import Route

    api_key = os.getenv("MCP_API_KEY")

    class BearerAuth(BaseHTTPMiddleware):
        async def dispatch(self, request, call_next):
            if request.url.path == "/health":
                return await call_next(request)
            auth = request.headers.get("authorization", "")
            if not auth.startswith("Bearer ") or auth[7:] != api_key:
                return JSONResponse({"error": "unauthorized"}, status_code=401)
            return await call_next(request)

    starlette_app = mcp.streamable_http_app()

    if api_key:
        starlette_app.add_middleware(BearerAuth)

    starlette_app.routes.append(
        Route("/health", lambda r: JSONResponse({"status": "ok", "service": "duty-planner"}))
    )

    config = uvicorn.Config(
        starlette_app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        log_level="info",
    )
    await uvicorn.Server(config).serve()


def main() -> None:
    global _ENV_FILE

    parser = argparse.ArgumentParser(description="Run duty-planner MCP server")
    parser.add_argument("--env-file", default=None, help="Path to .env file")
    parser.add_argument(
        "--transport",
        default=None,
        choices=["stdio", "sse", "streamable-http"],
        help="MCP transport (default: streamable-http when PORT is set, else stdio)",
    )
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "WARNING"))
    args = parser.parse_args()
    _ENV_FILE = args.env_file
    logging.basicConfig(level=args.log_level.upper())

    transport = args.transport
    if transport is None:
        transport = "streamable-http" if os.getenv("PORT") else "stdio"
    logger.info("starting duty-planner MCP server (transport=%s)", transport)

    if transport == "streamable-http":
        import anyio
        anyio.run(_run_http)
    else:
        mcp.run(transport=transport)


if __name__ == "__main__":
    main()
