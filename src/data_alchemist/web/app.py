"""Data Alchemist Web API: FastAPI backend.

Stateless JSON endpoints; the front end parses uploaded sheets and sends
records in the request body.

  POST /api/validate            → ValidationResult for {records, entity_type}
  POST /api/search              → filtered records for {records, query}
  POST /api/parse-query         → structured conditions for {query}
  GET  /api/schemas[/{entity}]  → required / optional fields
  GET  /api/rule-types          → business rule editor templates
  POST /api/rules               → add a rule to a rule list
  POST /api/allocation-config   → export priorities + rules

Run with:
  uvicorn data_alchemist.web.app:app --reload --port 8000
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from data_alchemist import __version__
from data_alchemist.core.business_rules import (
    RULE_TEMPLATES,
    RuleDefinitionError,
    RuleSet,
    make_rule,
    rule_options,
)
from data_alchemist.core.engine import validate
from data_alchemist.core.filters import search
from data_alchemist.core.models import EntityType, UnknownEntityTypeError
from data_alchemist.core.priorities import (
    PrioritySettings,
    build_allocation_config,
    load_profiles,
    weight_shares,
)
from data_alchemist.core.query import parse_query
from data_alchemist.core.schemas import SCHEMAS, detect_entity_type, schema_for

# ---------------------------------------------------------------------------
# Configuration via environment variables
# ---------------------------------------------------------------------------

_ENV = os.environ.get("DATA_ALCHEMIST_ENV", "dev")

# CORS origins: "*" = all, otherwise a comma-separated list
_CORS_ORIGINS_RAW = os.environ.get("DATA_ALCHEMIST_CORS_ORIGINS", "*")
_CORS_ORIGINS: list[str] = (
    ["*"]
    if _CORS_ORIGINS_RAW in ("*", "")
    else [o.strip() for o in _CORS_ORIGINS_RAW.split(",") if o.strip()]
)
# allow_credentials is incompatible with allow_origins=["*"]
_CORS_ALLOW_CREDENTIALS = "*" not in _CORS_ORIGINS

# Optional YAML file adding or overriding priority presets
_PROFILES_OVERLAY_RAW = os.environ.get("DATA_ALCHEMIST_PROFILES", "")
_PROFILES_OVERLAY: Path | None = Path(_PROFILES_OVERLAY_RAW) if _PROFILES_OVERLAY_RAW else None

_logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
    _logger.info(
        "Data Alchemist started: env=%s cors=%s profiles_overlay=%s",
        _ENV,
        _CORS_ORIGINS_RAW,
        _PROFILES_OVERLAY or "-",
    )
    yield


app = FastAPI(
    title="Data Alchemist API",
    description="Validation and search for client / worker / task sheets",
    version=__version__,
    lifespan=_lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_CORS_ORIGINS,
    allow_credentials=_CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be JSON") from None
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return body


def _records(body: dict, key: str = "records") -> list[dict]:
    records = body.get(key, [])
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise HTTPException(status_code=422, detail=f"'{key}' must be a list of objects")
    return records


def _entity_type(value: Any) -> EntityType:
    try:
        return EntityType.parse(value)
    except UnknownEntityTypeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None


def _datasets(body: dict) -> dict[str, list[dict]]:
    raw = body.get("datasets") or {}
    if not isinstance(raw, dict):
        raise HTTPException(status_code=422, detail="'datasets' must be an object")
    return {et.value: _records(raw, et.value) for et in EntityType}


def _rule_set(items: Any) -> RuleSet:
    if items is None:
        return RuleSet()
    if not isinstance(items, list):
        raise HTTPException(status_code=422, detail="'rules' must be a list")
    try:
        return RuleSet.from_list(items)
    except RuleDefinitionError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


# ---------------------------------------------------------------------------
# Schemas and entity detection
# ---------------------------------------------------------------------------


@app.get("/api/schemas")
async def list_schemas():
    return {"schemas": [schema.to_dict() for schema in SCHEMAS.values()]}


@app.get("/api/schemas/{entity_type}")
async def get_schema(entity_type: str):
    return schema_for(_entity_type(entity_type)).to_dict()


@app.get("/api/detect-entity")
async def detect_entity(filename: str):
    detected = detect_entity_type(filename)
    return {"filename": filename, "entityType": detected.value if detected else None}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@app.post("/api/validate")
async def validate_records(request: Request):
    body = await _json_body(request)
    records = _records(body)
    entity_type = _entity_type(body.get("entity_type"))
    result = validate(records, entity_type)
    _logger.info(
        "validate %s: %d rows, %d errors",
        entity_type.value,
        result.summary.total_rows,
        result.summary.error_count,
    )
    return result.to_dict()


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@app.post("/api/parse-query")
async def parse_query_endpoint(request: Request):
    body = await _json_body(request)
    query = str(body.get("query") or "")
    return {"conditions": [c.to_dict() for c in parse_query(query)]}


@app.post("/api/search")
async def search_records(request: Request):
    """Filter records with a query; reports which search path was taken."""
    body = await _json_body(request)
    records = _records(body)
    query = str(body.get("query") or "").strip()

    if not query:
        return {"conditions": [], "fallback": False, "records": records}

    conditions = parse_query(query)
    return {
        "conditions": [c.to_dict() for c in conditions],
        "fallback": not conditions,
        "records": search(records, query),
    }


# ---------------------------------------------------------------------------
# Business rules
# ---------------------------------------------------------------------------


@app.get("/api/rule-types")
async def rule_types():
    return {"ruleTypes": [tpl.to_dict() for tpl in RULE_TEMPLATES.values()]}


@app.post("/api/rules/options")
async def rules_options(request: Request):
    body = await _json_body(request)
    return rule_options(_datasets(body))


@app.post("/api/rules")
async def add_rule(request: Request):
    """Validate a new rule and return the rule list with it appended."""
    body = await _json_body(request)
    rules = _rule_set(body.get("rules"))
    raw = body.get("rule") or {}
    if not isinstance(raw, dict):
        raise HTTPException(status_code=422, detail="'rule' must be an object")
    try:
        rule = make_rule(raw.get("type", ""), raw.get("name", ""), raw.get("parameters") or {})
        rules = rules.add(rule)
    except RuleDefinitionError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None
    return {"rule": rule.to_dict(), "rules": rules.to_list()}


# ---------------------------------------------------------------------------
# Priorities and allocation config
# ---------------------------------------------------------------------------


@app.get("/api/profiles")
async def profiles():
    return {"profiles": [p.to_dict() for p in load_profiles(_PROFILES_OVERLAY).values()]}


@app.post("/api/allocation-config")
async def allocation_config(request: Request):
    body = await _json_body(request)
    try:
        priorities = PrioritySettings.from_dict(body.get("priorities") or {})
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None
    rules = _rule_set(body.get("rules"))
    config = build_allocation_config(priorities, _datasets(body), rules)
    config["weightShares"] = weight_shares(priorities)
    return config
