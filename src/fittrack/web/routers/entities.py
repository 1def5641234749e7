"""Cascade delete routes over entity paths.

Paths mirror the document layout below a user, e.g.
``/users/{user_id}/programs/{program_id}/weeks/{week_id}``.
"""

from fastapi import APIRouter, Header, Request

from ...models.hierarchy import EntityRef

router = APIRouter(prefix="/users", tags=["entities"])


def _entity_ref(user_id: str, entity_path: str) -> EntityRef:
    return EntityRef.from_path(f"users/{user_id}/{entity_path}")


@router.get("/{user_id}/{entity_path:path}/delete-preview")
async def delete_preview(
    request: Request,
    user_id: str,
    entity_path: str,
    x_user_id: str | None = Header(default=None),
):
    """Count what a cascade delete of the entity would remove."""
    cascade = request.app.state.cascade
    ref = _entity_ref(user_id, entity_path)
    counts = await cascade.get_cascade_delete_counts(x_user_id, ref)
    return {"level": ref.level.value, "counts": counts.to_dict(), "summary": counts.get_summary()}


@router.delete("/{user_id}/{entity_path:path}")
async def delete_entity(
    request: Request,
    user_id: str,
    entity_path: str,
    x_user_id: str | None = Header(default=None),
):
    """Delete the entity and all of its descendants."""
    cascade = request.app.state.cascade
    ref = _entity_ref(user_id, entity_path)
    counts = await cascade.delete(x_user_id, ref)
    return {"success": True, "level": ref.level.value, "deleted": counts.to_dict()}
