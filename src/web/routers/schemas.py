"""Saved schema router: create, fetch, render and update."""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import Response

from src.markup.generator import build_document, to_script_tag
from src.markup.validation import validate_record, validate_schema_id
from src.shared.errors import AppErrors, NotFoundError, SchemaError, ValidationError
from src.storage.schema_repository import IMMUTABLE_FIELDS
from src.web.dependencies import embed_snippet, get_pipeline, get_schema_repository, get_settings
from src.web.pipeline import RequestContext, read_json, store_call

log = logging.getLogger(__name__)
router = APIRouter()

JSON_LD_MEDIA_TYPE = "application/ld+json"


def _require_schema_id(value, field: str = "id") -> str:
    result = validate_schema_id(value)
    if not result.success:
        raise ValidationError(AppErrors.INVALID_SCHEMA_ID, [{"field": field, "message": result.error}])
    return value


def _validated(body) -> dict:
    result = validate_record(body)
    if not result.success:
        raise ValidationError(AppErrors.INVALID_SCHEMA, [e.to_dict() for e in result.errors])
    return result.data


@router.post("/api/schemas")
async def create_schema(request: Request):
    pipeline = get_pipeline(request)

    async def operation(ctx: RequestContext):
        record = _validated(await read_json(request))
        dynamic = record.pop("dynamic", False)

        with store_call():
            saved = get_schema_repository(request).insert_one(ctx.user_id, record, dynamic=dynamic)

        ctx.extra["schemaId"] = saved.schema_id
        log.info("Created %s schema %s (dynamic=%s)", record.get("type"), saved.schema_id, saved.dynamic)
        payload = {"schemaId": saved.schema_id, "dynamic": saved.dynamic}
        if saved.dynamic:
            payload["embed"] = embed_snippet(get_settings(request).app_url, saved.schema_id)
        return payload

    return await pipeline.run(request, "/api/schemas", operation, status_code=201)


@router.get("/api/schemas")
async def get_schema(request: Request):
    pipeline = get_pipeline(request)

    async def operation(ctx: RequestContext):
        schema_id = _require_schema_id(request.query_params.get("id"))
        ctx.extra["schemaId"] = schema_id

        with store_call():
            saved = get_schema_repository(request).find_one(schema_id, user_id=ctx.user_id)

        if not saved:
            raise NotFoundError("Schema", schema_id)
        return {"schema": saved.to_dict()}

    return await pipeline.run(request, "/api/schemas", operation)


@router.get("/api/schemas/{schema_id}")
async def render_schema(schema_id: str, request: Request):
    """Public live endpoint embedded on third-party pages via <script src>."""
    pipeline = get_pipeline(request)

    async def operation(ctx: RequestContext):
        _require_schema_id(schema_id)
        ctx.extra["schemaId"] = schema_id

        with store_call():
            saved = get_schema_repository(request).find_one(schema_id)

        if not saved:
            raise NotFoundError("Schema", schema_id)
        if not saved.dynamic:
            raise SchemaError(AppErrors.NOT_DYNAMIC)

        return Response(
            content=to_script_tag(build_document(saved.document)),
            media_type=JSON_LD_MEDIA_TYPE,
            headers={"Access-Control-Allow-Origin": "*"},
        )

    return await pipeline.run(request, "/api/schemas/{id}", operation, require_auth=False)


@router.patch("/api/schemas/{schema_id}")
async def update_schema(schema_id: str, request: Request):
    pipeline = get_pipeline(request)

    async def operation(ctx: RequestContext):
        _require_schema_id(schema_id)
        ctx.extra["schemaId"] = schema_id

        body = await read_json(request)
        if not isinstance(body, dict):
            raise ValidationError(AppErrors.INVALID_SCHEMA, [{"field": "", "message": "Expected an object"}])

        immutable = [k for k in IMMUTABLE_FIELDS if k in body]
        if immutable:
            raise ValidationError(
                AppErrors.INVALID_SCHEMA,
                [{"field": k, "message": "Field cannot be changed"} for k in immutable],
            )

        if "type" in body:
            updates = _validated(body)
            if "dynamic" not in body:
                # model default, not a requested change
                updates.pop("dynamic", None)
        else:
            if "dynamic" in body and not isinstance(body["dynamic"], bool):
                raise ValidationError(
                    AppErrors.INVALID_SCHEMA,
                    [{"field": "dynamic", "message": "Input should be a valid boolean"}],
                )
            updates = body

        with store_call():
            saved = get_schema_repository(request).update_one(schema_id, ctx.user_id, updates)

        if not saved:
            raise NotFoundError("Schema", schema_id)
        return {}

    return await pipeline.run(request, "/api/schemas/{id}", operation)
