"""LoL Potential MCP Server.

FastMCP server with one analysis tool and a plain HTTP route,
``POST /api/analysis``, for web clients.
Run: lol-potential
"""

from __future__ import annotations

import json
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from starlette.requests import Request
from starlette.responses import JSONResponse

from . import pipeline
from .core.errors import (
    ConfigurationError,
    InvalidSummonerInput,
    RiotApiError,
    UpstreamForbidden,
    UpstreamNotFound,
    UpstreamRateLimited,
    UpstreamUnauthorized,
)

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True)

DEFAULT_TRANSPORT = "streamable-http"


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging for the server process."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    yield


mcp = FastMCP(
    "LoL Potential",
    instructions="Analyze a League of Legends player's recent ranked games and estimate their growth potential.",
    lifespan=lifespan,
)


# ─── Tool: Potential Analysis ────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def lol_analyze_potential(summoner_input: str) -> dict:
    """Potential score (0-100), trend and Korean summary from up to 20 recent ranked games.

    Args:
        summoner_input: Riot ID as 'gameName#tagLine' (e.g. 'Hide on bush#KR1'),
                        or a legacy bare summoner name.
    """
    analysis = await pipeline.run_analysis(summoner_input)
    return {
        "title": f"Potential: {analysis.summoner_name}",
        "analysis": analysis.model_dump(mode="json", by_alias=True),
        "summary": f"{analysis.potential_score}/100 ({analysis.trend.value}) - {analysis.potential_text}",
    }


# ─── HTTP Route ──────────────────────────────────────────────────────────────


def _error(message: str, status_code: int, details: str = "") -> JSONResponse:
    body = {"error": message}
    if details:
        body["details"] = details
    return JSONResponse(body, status_code=status_code)


def error_response(exc: Exception) -> JSONResponse:
    """Map a pipeline failure to the endpoint's error body and status."""
    if isinstance(exc, InvalidSummonerInput):
        return _error(str(exc), 400)
    if isinstance(exc, UpstreamRateLimited):
        return _error(
            "Rate limit exceeded. Please wait a moment before trying again.",
            429,
            "Too many requests to Riot API. Please try again in a few seconds.",
        )
    if isinstance(exc, UpstreamNotFound):
        return _error("Summoner not found", 500, str(exc))
    if isinstance(exc, (UpstreamUnauthorized, UpstreamForbidden)):
        return _error("Riot API key was rejected", 500, str(exc))
    if isinstance(exc, ConfigurationError):
        return _error("Server is not configured", 500, str(exc))
    if isinstance(exc, RiotApiError):
        return _error(str(exc), 500, f"{type(exc).__name__}: {exc}")
    return _error("Analysis failed", 500, f"{type(exc).__name__}: {exc}")


@mcp.custom_route("/api/analysis", methods=["POST"])
async def analysis_route(request: Request) -> JSONResponse:
    """Accept ``{"summonerInput": str}`` and return the analysis."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error("Request body must be JSON", 400)

    summoner_input = body.get("summonerInput") if isinstance(body, dict) else None
    if not summoner_input or not isinstance(summoner_input, str):
        return _error("Summoner input is required", 400)

    try:
        analysis = await pipeline.run_analysis(summoner_input)
    except (ConfigurationError, InvalidSummonerInput, RiotApiError) as exc:
        logger.warning("Analysis for %r failed: %s", summoner_input, exc)
        return error_response(exc)
    except Exception as exc:
        logger.error("Analysis for %r failed unexpectedly: %s", summoner_input, exc, exc_info=True)
        return error_response(exc)

    return JSONResponse({"success": True, "data": analysis.model_dump(mode="json", by_alias=True)})


def main():
    """Entry point for the CLI command."""
    mcp.run(transport=os.environ.get("MCP_TRANSPORT", DEFAULT_TRANSPORT))


if __name__ == "__main__":
    main()
