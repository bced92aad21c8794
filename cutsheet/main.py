import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, File, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .errors import (
    AppError,
    FileTooLarge,
    ReshapeError,
    app_error_handler,
    http_exception_handler,
    validation_error_handler,
)
from .logging_config import setup_logging
from .models import ErrorResponse, HealthResponse, ReshapeResponse
from .service import check_upload, reshape_bytes, reshape_csv_bytes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info("%s ready (max upload %d bytes)", settings.app_name, settings.max_upload_bytes)
    yield


app = FastAPI(
    title="cutsheet-reshaper",
    description="Reshape cut sheet exports from one column per operator to one row per operator",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

_ERRORS = {422: {"model": ErrorResponse}, 413: {"model": ErrorResponse}}


async def _read_upload(file: UploadFile, settings: Settings) -> bytes:
    limit = settings.max_upload_bytes
    try:
        if file.size is not None and file.size > limit:
            raise FileTooLarge(file.size, limit)
        # One byte past the limit is enough to reject the upload
        raw = await file.read(limit + 1)
        check_upload(file.filename, raw, settings)
    except AppError as e:
        logger.warning("rejected upload: %s", e.message, extra={"filename_uploaded": file.filename})
        raise
    return raw


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/reshape", response_model=ReshapeResponse, responses=_ERRORS)
async def reshape_csv(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
):
    raw = await _read_upload(file, settings)
    try:
        return reshape_csv_bytes(raw, settings)
    except ReshapeError as e:
        logger.warning("could not reshape %r: %s", file.filename, e.message, extra={"filename_uploaded": file.filename})
        raise


@app.post("/reshape/download", responses=_ERRORS)
async def reshape_csv_download(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
):
    raw = await _read_upload(file, settings)
    try:
        reshaped, result, _ = reshape_bytes(raw, settings)
    except ReshapeError as e:
        logger.warning("could not reshape %r: %s", file.filename, e.message, extra={"filename_uploaded": file.filename})
        raise

    return Response(
        content=reshaped,
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{settings.download_filename}"',
            "X-Records": str(len(result.records)),
        },
    )
