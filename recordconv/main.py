import logging
from contextlib import asynccontextmanager
from pathlib import PurePath
from typing import Optional

from fastapi import FastAPI, UploadFile, File, HTTPException, Query
from fastapi.responses import Response
from pydantic import ValidationError

from .config import ConversionOptions
from .errors import ConversionError
from .models import NormalizeResponse, HealthResponse
from .pipeline import convert, normalize_bytes
from .renderers import MEDIA_TYPES
from .rules import ALLOWED_INPUT_TYPES, DEFAULT_DELIMITER
from .setup_logging import setup_logging

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    yield


app = FastAPI(
    title="recordconv",
    description="Convert CSV or fixed-width PRN personal records to JSON or HTML",
    version="0.1.0",
    lifespan=lifespan,
)


def _input_type_for(file: UploadFile, input_type: Optional[str]) -> str:
    """Explicit type wins; otherwise the upload's file extension decides."""
    if input_type:
        return input_type
    suffix = PurePath(file.filename or "").suffix.lower().lstrip(".")
    if suffix not in ALLOWED_INPUT_TYPES:
        raise HTTPException(status_code=422, detail="Only CSV or PRN files are supported")
    return suffix


def _options(**kwargs) -> ConversionOptions:
    try:
        return ConversionOptions(**kwargs)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=[err["msg"] for err in e.errors()])


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/convert")
async def convert_file(
    file: UploadFile = File(...),
    input_type: Optional[str] = Query(default=None),
    output_type: str = Query(default="json"),
    delimiter: str = Query(default=DEFAULT_DELIMITER),
):
    options = _options(
        input_type=_input_type_for(file, input_type),
        output_type=output_type,
        delimiter=delimiter,
    )

    raw = await file.read()
    try:
        body = "".join(convert([raw], options.input_type, options.output_type, options))
    except ConversionError as e:
        log.warning("conversion of %s failed: %s", file.filename, e)
        raise HTTPException(status_code=422, detail=str(e))

    return Response(content=body, media_type=MEDIA_TYPES[options.output_type])

@app.post("/normalize", response_model=NormalizeResponse)
async def normalize_file(
    file: UploadFile = File(...),
    input_type: Optional[str] = Query(default=None),
    delimiter: str = Query(default=DEFAULT_DELIMITER),
):
    options = _options(input_type=_input_type_for(file, input_type), delimiter=delimiter)

    raw = await file.read()
    try:
        return normalize_bytes(raw, options.input_type, options)
    except ConversionError as e:
        log.warning("normalization of %s failed: %s", file.filename, e)
        raise HTTPException(status_code=422, detail=str(e))
