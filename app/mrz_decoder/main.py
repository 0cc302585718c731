from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import CONFIG
from .errors import DecodeError
from .field_registry import layout_registry_payload
from .pipeline.parser import default_options, parse
from .pipeline.policy import ChecksumMode, ChecksumPolicy
from .schemas import ErrorResponse, ParseRequest, ParseResponse

logging.basicConfig(level=CONFIG.log_level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
LOGGER = logging.getLogger("mrz_decoder")

app = FastAPI(title="MRZ Decoder")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(code: str, message: str, status_code: int, field: Optional[str] = None) -> JSONResponse:
    payload = ErrorResponse.model_validate({"error": {"code": code, "message": message, "field": field}})
    return JSONResponse(payload.model_dump(), status_code=status_code)


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/layouts")
async def layouts() -> Dict[str, object]:
    return layout_registry_payload()


@app.post("/parse")
async def parse_endpoint(request: ParseRequest):
    options = default_options()
    if request.checksum_mode:
        try:
            mode = ChecksumMode(request.checksum_mode.lower())
        except ValueError:
            return _error("invalid_request", f"Unknown checksum_mode {request.checksum_mode!r}", 400, "checksum_mode")
        options = replace(options, checksums=ChecksumPolicy.uniform(mode))
    if request.reference_date:
        options = replace(options, reference_date=request.reference_date)

    try:
        document = parse(request.mrz, options)
    except DecodeError as exc:
        LOGGER.info("MRZ rejected: %s", exc)
        return _error(exc.code, exc.message, 422, exc.field)

    LOGGER.info("MRZ decoded as %s", document.kind)
    response = ParseResponse(document=document)
    return JSONResponse(response.model_dump(mode="json"))
