"""
Biome generation API endpoints - description in, datapack ZIP out
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from biomecraft.api.rate_limit import FixedWindowRateLimiter, create_default_limiter
from biomecraft.config import APP_NAME, APP_VERSION, is_debug
from biomecraft.datapack.generator import generate_complete_datapack
from biomecraft.datapack.naming import derive_biome_name, sanitize_biome_name
from biomecraft.errors import (
    BiomeCraftError,
    DatapackError,
    InvalidRequestError,
    RateLimitExceededError,
)
from biomecraft.llm.biome_generator import BiomeGenerator
from biomecraft.minecraft.normalize import normalize_biome
from biomecraft.minecraft.validator import validate_biome_structure

logger = logging.getLogger(__name__)

router = APIRouter()

MIN_DESCRIPTION_LENGTH = 10
MAX_DESCRIPTION_LENGTH = 1000

_limiter = create_default_limiter()


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing request"""
    success: bool = False
    error: str
    code: str
    message: str
    details: str | None = None


def get_rate_limiter() -> FixedWindowRateLimiter:
    return _limiter


def get_biome_generator() -> BiomeGenerator:
    return BiomeGenerator()


def get_client_ip(request: Request) -> str:
    """First forwarded address, then X-Real-IP, then the socket peer"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded and forwarded.split(",")[0].strip():
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def error_response(
    error: BiomeCraftError,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=error.title,
        code=error.code,
        message=error.public_message,
        details=str(error) if is_debug() else None,
    )
    return JSONResponse(
        status_code=error.status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


async def _read_json_object(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidRequestError("Invalid JSON", "Request body must be valid JSON")

    if not isinstance(body, dict):
        raise InvalidRequestError("Invalid request body", "Request body must be an object")
    return body


def parse_generate_request(body: dict[str, Any]) -> tuple[str, str]:
    """
    Check the description and pick the biome name.

    Returns:
        (description, sanitized biome name)

    Raises:
        InvalidRequestError: On any rule violation
    """
    description = body.get("description")
    has_custom_name = "biomeName" in body
    custom_name = body.get("biomeName")

    if not description or not isinstance(description, str):
        raise InvalidRequestError(
            "Description is required", "Please provide a biome description as a string"
        )
    if len(description.strip()) < MIN_DESCRIPTION_LENGTH:
        raise InvalidRequestError(
            "Description too short",
            f"Please provide a more detailed description "
            f"(at least {MIN_DESCRIPTION_LENGTH} characters)",
        )
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise InvalidRequestError(
            "Description too long",
            f"Description must be less than {MAX_DESCRIPTION_LENGTH} characters",
        )

    if has_custom_name and not isinstance(custom_name, str):
        raise InvalidRequestError("Invalid biome name", "Biome name must be a string")

    if custom_name:
        biome_name = sanitize_biome_name(custom_name)
        if not biome_name:
            raise InvalidRequestError(
                "Invalid biome name",
                "Biome name must contain at least one alphanumeric character",
            )
    else:
        biome_name = derive_biome_name(description)

    return description, biome_name


@router.post("/generate")
async def generate_biome(
    request: Request,
    generator: BiomeGenerator = Depends(get_biome_generator),
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
):
    """Generate a biome datapack ZIP from a natural-language description"""
    try:
        client_ip = get_client_ip(request)
        if limiter.is_rate_limited(client_ip):
            return error_response(
                RateLimitExceededError(),
                headers={"Retry-After": str(int(limiter.window_seconds))},
            )

        body = await _read_json_object(request)
        description, biome_name = parse_generate_request(body)

        logger.info(f"Generating biome: name={biome_name}, client={client_ip}")

        biome = await generator.generate(description)

        try:
            datapack = generate_complete_datapack(
                biome,
                biome_name,
                f"AI Generated {biome_name} biome - {description[:100]}",
            )
        except DatapackError:
            raise
        except Exception as e:
            raise DatapackError(f"{type(e).__name__}: {e}") from e

        logger.info(f"Returning datapack for {biome_name} ({len(datapack)} bytes)")

        return Response(
            content=datapack,
            media_type="application/zip",
            headers={
                "Content-Disposition": f'attachment; filename="{biome_name}_datapack.zip"',
                "X-Biome-Name": biome_name,
                "X-Biome-Temperature": str(biome.temperature),
                "X-Biome-Downfall": str(biome.downfall),
                "X-Biome-Preview": json.dumps(biome.preview()),
            },
        )
    except BiomeCraftError as e:
        log = logger.info if e.status_code < 500 else logger.error
        log(f"Biome generation failed [{e.code}]: {e}")
        return error_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return error_response(BiomeCraftError(f"{type(e).__name__}: {e}"))


@router.get("/generate")
async def generate_info(limiter: FixedWindowRateLimiter = Depends(get_rate_limiter)):
    """Describe the generation endpoint"""
    return {
        "name": f"{APP_NAME} API",
        "version": APP_VERSION,
        "endpoints": {
            "POST": {
                "description": "Generate a custom Minecraft biome datapack",
                "body": {
                    "description": (
                        f"string (required, {MIN_DESCRIPTION_LENGTH}-"
                        f"{MAX_DESCRIPTION_LENGTH} chars)"
                    ),
                    "biomeName": "string (optional)",
                },
                "returns": "application/zip (datapack file)",
            },
        },
        "rateLimit": {
            "requests": limiter.max_requests,
            "window": f"{int(limiter.window_seconds)} seconds",
        },
    }


@router.post("/validate")
async def validate_biome(request: Request, normalize: bool = True):
    """Check a biome document without generating anything"""
    try:
        body = await _read_json_object(request)
    except InvalidRequestError as e:
        return error_response(e)

    document = normalize_biome(body, merge_defaults=False) if normalize else body
    report = validate_biome_structure(document)
    return report.to_dict()
