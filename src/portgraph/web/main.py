"""FastAPI app: serve port listings, closures and rendered graphs."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from portgraph.api import open_registry
from portgraph.core.closure import UnknownPackageError, build_closure
from portgraph.core.registry import Registry
from portgraph.core.render import FORMATS, render

app = FastAPI(
    title="portgraph API",
    description="Port dependency closure and graph backend",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _registry() -> Registry:
    registry = open_registry()
    if registry is None:
        raise HTTPException(status_code=503, detail="No ports directory configured")
    return registry


@app.get("/api/packages")
def get_packages() -> dict:
    """List all ports with their direct dependencies."""
    return {"packages": build_closure([], _registry())}


@app.get("/api/closure")
def get_closure(
    root: list[str] = Query(default=[]),
    strict: bool = False,
) -> dict:
    """Return the dependency closure of the ``root`` query params (all ports if none)."""
    try:
        closure = build_closure(root, _registry(), strict=strict)
    except UnknownPackageError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"closure": closure}


@app.get("/api/graph/{fmt}", response_class=PlainTextResponse)
def get_graph(
    fmt: str,
    root: list[str] = Query(default=[]),
) -> str:
    """Render the closure of ``root`` as text, dot, dgml, mermaid or json."""
    if fmt not in FORMATS:
        raise HTTPException(status_code=404, detail=f"Unknown format: {fmt}")
    registry = _registry()
    return render(build_closure(root, registry), registry, fmt)
