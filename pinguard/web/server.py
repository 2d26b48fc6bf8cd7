"""
FastAPI web server — analyze sources posted as JSON.

Routes:
  POST /api/analyze           one source        -> FileAnalysis dict
  POST /api/analyze/project   several sources   -> ProjectAnalysis dict
  GET  /api/capabilities      valid pins per peripheral
  GET  /api/config            active analyzer config
"""

from __future__ import annotations

import base64
import binascii
import logging
import os

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from pinguard.analyzer import analyze_source
from pinguard.config import AnalyzerConfig, config_to_dict, load_config
from pinguard.peripherals import ADCValidator, VALIDATORS
from pinguard.project import merge_analyses
from pinguard.serialization import analysis_to_dict, project_to_dict


log = logging.getLogger(__name__)


# ── App ────────────────────────────────────────────────────────────

app = FastAPI(title="pinguard")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _config() -> AnalyzerConfig:
    """Defaults, or the override file named by PINGUARD_CONFIG."""
    return load_config(os.environ.get("PINGUARD_CONFIG") or None)


# ── Models ─────────────────────────────────────────────────────────

class SourceFile(BaseModel):
    source_id: str = "<string>"
    text: str
    bytecode_b64: str | None = None     # companion .mrb, base64


class AnalyzeRequest(SourceFile):
    estimate: bool = True
    max_response_ms: float | None = Field(default=None, gt=0)


class ProjectRequest(BaseModel):
    files: list[SourceFile] = Field(min_length=1)
    estimate: bool = True
    max_response_ms: float | None = Field(default=None, gt=0)


def _bytecode(src: SourceFile) -> bytes | None:
    if src.bytecode_b64 is None:
        return None
    try:
        return base64.b64decode(src.bytecode_b64, validate=True)
    except binascii.Error:
        raise HTTPException(422, f"{src.source_id}: bytecode_b64 is not valid base64") from None


def _analyze(src: SourceFile, estimate: bool, max_response_ms: float | None):
    return analyze_source(
        src.text, src.source_id, _config(),
        estimate=estimate,
        max_response_ms=max_response_ms,
        bytecode=_bytecode(src),
    )


# ── Routes ─────────────────────────────────────────────────────────

@app.post("/api/analyze")
def analyze(req: AnalyzeRequest):
    result = _analyze(req, req.estimate, req.max_response_ms)
    return analysis_to_dict(result)


@app.post("/api/analyze/project")
def analyze_project_sources(req: ProjectRequest):
    ids = [f.source_id for f in req.files]
    if len(set(ids)) != len(ids):
        raise HTTPException(422, "source_id values must be unique within a project")
    files = [_analyze(f, req.estimate, req.max_response_ms) for f in req.files]
    return project_to_dict(merge_analyses(files, _config()))


@app.get("/api/capabilities")
def capabilities():
    out = {}
    for kind, validator in VALIDATORS.items():
        entry: dict = {"valid_pins": [str(p) for p in validator.valid_pins()]}
        if isinstance(validator, ADCValidator):
            entry["channels"] = validator.channels()
        elif hasattr(validator, "units"):
            entry["units"] = validator.units()
        out[kind.value] = entry
    return out


@app.get("/api/config")
def get_config():
    return config_to_dict(_config())


# ── Entry point ────────────────────────────────────────────────────

def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    uvicorn.run("pinguard.web.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
