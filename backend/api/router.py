import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_field_resolver, get_ollama_gateway, get_resume_store
from config import settings
from models.requests import FieldQuery, ModelSwitchRequest
from models.responses import (
    CurrentResumeResponse,
    ExtractionResponse,
    ModelListResponse,
    ModelSwitchResponse,
    ResolvedField,
    UploadResponse,
)
from services import pdf_parser
from services.errors import (
    GatewayError,
    GatewayNotFoundError,
    GatewayTimeoutError,
    MalformedModelOutputError,
    ModelSwapConflictError,
    NoExtractionError,
    NoResumeError,
)
from services.ollama_client import OllamaGateway
from services.pipeline.resolver import FieldResolver
from services.resume_extractor import extract_structured_resume
from services.resume_store import ResumeRecord, ResumeStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")
limiter = Limiter(key_func=get_remote_address)


def _gateway_http_error(e: GatewayError) -> HTTPException:
    if isinstance(e, GatewayTimeoutError):
        return HTTPException(status_code=504, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))


@router.get("/health")
async def health(gateway: OllamaGateway = Depends(get_ollama_gateway)):
    return {
        "status": "ok",
        "ollama_base_url": gateway.base_url,
        "active_model": gateway.active_model.get(),
    }


# ---------------------------------------------------------------------------
# Resume upload
# ---------------------------------------------------------------------------

@router.post("/resume/upload", response_model=UploadResponse)
@limiter.limit("10/minute")
async def upload_resume(
    request: Request,
    file: UploadFile = File(...),
    store: ResumeStore = Depends(get_resume_store),
):
    if not pdf_parser.is_pdf(file.filename, file.content_type):
        raise HTTPException(status_code=400, detail="File must be a PDF")

    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="No file provided")

    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Max size: {settings.max_upload_size_mb}MB",
        )

    try:
        text = pdf_parser.extract_text(content)
    except Exception:
        logger.exception("Failed to parse PDF %s", file.filename)
        raise HTTPException(status_code=400, detail="Could not parse PDF file")

    if not text.strip():
        raise HTTPException(status_code=400, detail="No text could be extracted from PDF")

    record = ResumeRecord(file_name=file.filename or "resume.pdf", raw_text=text)
    store.store(record)

    return UploadResponse(
        file_name=record.file_name,
        text_length=len(text),
        preview=record.preview(200),
    )


@router.get("/resume/current", response_model=CurrentResumeResponse)
async def current_resume(store: ResumeStore = Depends(get_resume_store)):
    record = store.get()
    if record is None:
        raise HTTPException(status_code=404, detail="No resume uploaded yet")

    return CurrentResumeResponse(
        file_name=record.file_name,
        uploaded_at=record.uploaded_at,
        text_length=len(record.raw_text),
        preview=record.preview(300),
        extracted=record.structured is not None,
    )


@router.delete("/resume/current")
async def clear_resume(store: ResumeStore = Depends(get_resume_store)):
    store.clear()
    return {"success": True, "message": "Resume cleared from memory"}


# ---------------------------------------------------------------------------
# Structured extraction
# ---------------------------------------------------------------------------

@router.post("/extract", response_model=ExtractionResponse)
@limiter.limit("10/minute")
async def extract_resume(
    request: Request,
    store: ResumeStore = Depends(get_resume_store),
    gateway: OllamaGateway = Depends(get_ollama_gateway),
):
    try:
        record = store.require_resume()
    except NoResumeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info("Starting extraction for resume: %s", record.file_name)
    try:
        structured = await extract_structured_resume(gateway, record.raw_text)
    except GatewayError as e:
        logger.error("Extraction failed: %s", e)
        raise _gateway_http_error(e)
    except MalformedModelOutputError as e:
        raise HTTPException(status_code=502, detail=f"Extraction failed: {e}")

    store.attach_extraction(record.raw_text, structured)
    return ExtractionResponse(structured_resume=structured)


@router.get("/extract/current", response_model=ExtractionResponse)
async def current_extraction(store: ResumeStore = Depends(get_resume_store)):
    try:
        structured = store.require_structured()
    except (NoResumeError, NoExtractionError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ExtractionResponse(structured_resume=structured)


# ---------------------------------------------------------------------------
# Autofill
# ---------------------------------------------------------------------------

@router.post("/autofill", response_model=ResolvedField)
async def autofill_field(
    query: FieldQuery,
    store: ResumeStore = Depends(get_resume_store),
    resolver: FieldResolver = Depends(get_field_resolver),
):
    try:
        resume = store.require_structured()
    except NoResumeError as e:
        body = ResolvedField(reasoning=str(e), matched_source="no_resume")
        return JSONResponse(status_code=400, content=body.model_dump(by_alias=True))
    except NoExtractionError as e:
        body = ResolvedField(reasoning=str(e), matched_source="no_extraction")
        return JSONResponse(status_code=400, content=body.model_dump(by_alias=True))

    return await resolver.resolve(query, resume)


@router.post("/autofill/batch", response_model=dict[str, ResolvedField])
async def autofill_batch(
    fields: dict[str, FieldQuery],
    store: ResumeStore = Depends(get_resume_store),
    resolver: FieldResolver = Depends(get_field_resolver),
):
    try:
        resume = store.require_structured()
    except (NoResumeError, NoExtractionError) as e:
        logger.warning("Batch autofill rejected: %s", e)
        return JSONResponse(status_code=400, content={})

    return await resolver.resolve_batch(fields, resume)


# ---------------------------------------------------------------------------
# Model administration
# ---------------------------------------------------------------------------

@router.get("/ollama/models", response_model=ModelListResponse)
async def list_models(gateway: OllamaGateway = Depends(get_ollama_gateway)):
    try:
        models = await gateway.list_models()
    except GatewayError as e:
        logger.error("Failed to fetch Ollama models: %s", e)
        raise _gateway_http_error(e)
    return ModelListResponse(models=models, active_model=gateway.active_model.get())


@router.get("/ollama/model")
async def current_model(gateway: OllamaGateway = Depends(get_ollama_gateway)):
    return {"model": gateway.active_model.get()}


@router.post("/ollama/model", response_model=ModelSwitchResponse)
async def switch_model(
    body: ModelSwitchRequest,
    gateway: OllamaGateway = Depends(get_ollama_gateway),
):
    requested = body.model.strip()
    if not requested:
        raise HTTPException(status_code=400, detail="Model name must not be empty")

    try:
        previous = await gateway.switch_model(requested, expected=body.expected_model)
    except GatewayNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ModelSwapConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except GatewayError as e:
        logger.error("Failed to verify Ollama model %s: %s", requested, e)
        raise _gateway_http_error(e)

    return ModelSwitchResponse(model=requested, previous_model=previous)
