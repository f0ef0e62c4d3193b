"""
Component + compile REST routes.

All routes are mounted under /api by main.py.  The registry and settings are
read from ``request.app.state``, set once by create_app().
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from dfgraph.compiler import Compiler
from dfgraph.errors import CompileError, SchemaError, UnknownComponentError
from dfgraph.graph.schema import GraphModel
from dfgraph.server.serializers import serialize_descriptor, serialize_tree

logger = logging.getLogger(__name__)

router = APIRouter()


def _compiler(request: Request) -> Compiler:
    return Compiler(request.app.state.registry, request.app.state.settings)


def _error_response(exc: Exception) -> JSONResponse:
    if isinstance(exc, CompileError):
        error = exc.to_dict()
    else:
        error = {"kind": type(exc).__name__, "message": str(exc), "nodeId": None, "field": None}
    logger.info(f"Compile request rejected: {error['kind']}: {exc}")
    return JSONResponse(status_code=422, content={"error": error})


# ── GET /components ───────────────────────────────────────────────────────────

@router.get("/components")
async def list_components(request: Request) -> Dict[str, Any]:
    return serialize_tree(request.app.state.registry.list_by_category())


# ── GET /components/search ────────────────────────────────────────────────────

@router.get("/components/search")
async def search_components(request: Request, q: str = Query("")) -> List[Dict[str, Any]]:
    return [serialize_descriptor(d, with_form=False) for d in request.app.state.registry.search(q)]


# ── GET /components/:id ───────────────────────────────────────────────────────

@router.get("/components/{descriptor_id}")
async def get_component(request: Request, descriptor_id: str) -> Dict[str, Any]:
    try:
        descriptor = request.app.state.registry.descriptor(descriptor_id)
    except UnknownComponentError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return serialize_descriptor(descriptor)


# ── POST /validate ────────────────────────────────────────────────────────────

@router.post("/validate")
async def validate_graph(request: Request, body: GraphModel):
    try:
        _compiler(request).validate(body.to_snapshot())
    except (CompileError, SchemaError) as exc:
        return _error_response(exc)
    return {"ok": True}


# ── POST /compile ─────────────────────────────────────────────────────────────

@router.post("/compile")
async def compile_graph(request: Request, body: GraphModel):
    try:
        script = _compiler(request).compile(body.to_snapshot())
    except (CompileError, SchemaError) as exc:
        return _error_response(exc)
    return {
        "script": script.source,
        "order": list(script.order),
        "variables": script.variables,
    }
