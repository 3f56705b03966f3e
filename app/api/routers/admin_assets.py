"""
🗑️ Admin asset routes
=====================

- DELETE /api/mux-asset/{asset_id}  → delete by asset id (password in `X-Admin-Password`)
- POST   /api/mux-asset/delete      → delete by asset id, playback id or playback URL
                                      (password in header or body `password`)

Both are idempotent: an asset Mux no longer knows answers
`{ok: true, alreadyDeleted: true}`.

The flexible route checks the password before it validates the body.
"""

import json
from typing import Optional

from fastapi import APIRouter, Depends, Header, Path, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.api.http_utils import json_no_store
from app.core.dependencies import get_reconciler
from app.dependencies.admin import check_admin_password, require_admin
from app.schemas.mux import DeleteAssetIn, DeleteOut
from app.services.deletion import DeletionReconciler

router = APIRouter(prefix="/mux-asset", tags=["admin"])


def _body_password(raw: bytes) -> Optional[str]:
    """Best-effort read of `password` from a JSON body that is not yet validated."""
    try:
        payload = json.loads(raw) if raw else None
    except ValueError:
        return None
    if isinstance(payload, dict) and isinstance(payload.get("password"), str):
        return payload["password"]
    return None


@router.delete("/{asset_id}", summary="Delete an asset by id", dependencies=[Depends(require_admin)])
async def delete_asset(
    asset_id: str = Path(..., min_length=1, max_length=255),
    reconciler: DeletionReconciler = Depends(get_reconciler),
):
    outcome = await reconciler.delete_asset(asset_id)
    return json_no_store(DeleteOut(ok=outcome.ok, already_deleted=outcome.already_deleted or None))


@router.post(
    "/delete",
    summary="Delete an asset by any identifier",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": DeleteAssetIn.model_json_schema(by_alias=True)}},
        }
    },
)
async def delete_asset_flexible(
    request: Request,
    x_admin_password: Optional[str] = Header(default=None, alias="X-Admin-Password"),
    reconciler: DeletionReconciler = Depends(get_reconciler),
):
    raw = await request.body()
    check_admin_password(x_admin_password or _body_password(raw))

    try:
        body = DeleteAssetIn.model_validate_json(raw or b"{}")
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from e

    outcome = await reconciler.delete_by_any_identifier(
        asset_id=body.asset_id,
        playback_id=body.playback_id,
        playback_url=body.playback_url,
    )
    return json_no_store(
        DeleteOut(ok=outcome.ok, asset_id=outcome.asset_id, already_deleted=outcome.already_deleted or None)
    )
