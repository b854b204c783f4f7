from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from app.api.schemas import EncryptedFlowRequestSchema, ErrorSchema, FlowEndpointStatusSchema, FlowKeysSchema
from app.application.exceptions import KeyMismatchError, MalformedPayloadError, PayloadIntegrityError
from app.application.use_cases.flow_endpoint import KEY_MISMATCH_HINT, FlowEndpointUseCase
from app.wiring.dependencies import get_flow_endpoint_use_case

router = APIRouter()
logger = logging.getLogger(__name__)

# Meta treats 421 as "decrypt again with a refreshed public key"
DECRYPTION_FAILED_STATUS = 421


def _error(status_code: int, error: str, hint: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorSchema(error=error, hint=hint).model_dump(exclude_none=True),
    )


@router.post("/api/flows/endpoint")
async def flow_endpoint(
    request: Request,
    use_case: FlowEndpointUseCase = Depends(get_flow_endpoint_use_case),
) -> Response:
    body = await request.body()
    try:
        envelope = EncryptedFlowRequestSchema.model_validate(json.loads(body.decode("utf-8")))
    except (UnicodeDecodeError, json.JSONDecodeError, ValidationError):
        logger.warning("Flow request missing required envelope fields")
        return _error(400, "Missing required fields")

    try:
        encrypted = await run_in_threadpool(use_case.handle, envelope.model_dump())
    except KeyMismatchError:
        return _error(DECRYPTION_FAILED_STATUS, "Decryption failed", KEY_MISMATCH_HINT)
    except PayloadIntegrityError:
        logger.warning("Flow payload failed integrity check")
        return _error(DECRYPTION_FAILED_STATUS, "Decryption failed")
    except MalformedPayloadError:
        return _error(500, "Failed to process flow request")
    except Exception:
        logger.exception("Fatal error in flow endpoint")
        return _error(500, "Internal error")

    return PlainTextResponse(encrypted, media_type="text/plain")


@router.get("/api/flows/endpoint", response_model=FlowEndpointStatusSchema)
def flow_endpoint_status(
    use_case: FlowEndpointUseCase = Depends(get_flow_endpoint_use_case),
) -> FlowEndpointStatusSchema:
    if use_case.key_status().configured:
        return FlowEndpointStatusSchema(status="ready", message="Flow endpoint configured and ready")
    return FlowEndpointStatusSchema(
        status="not_configured",
        message="Private key not configured. It is generated on the first flow request.",
    )


@router.get("/api/flows/endpoint/keys", response_model=FlowKeysSchema)
def flow_endpoint_keys(
    response: Response,
    use_case: FlowEndpointUseCase = Depends(get_flow_endpoint_use_case),
) -> FlowKeysSchema:
    response.headers["Cache-Control"] = "no-store"
    status = use_case.key_status()
    return FlowKeysSchema(configured=status.configured and bool(status.public_key), public_key=status.public_key)
