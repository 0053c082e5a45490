"""Relation snapshot and the external acceptance flow."""

from fastapi import APIRouter, HTTPException

from recipeshare.dependencies import RelationBackendDep
from recipeshare.exceptions import RelationNotFound
from recipeshare.models import Relation

router = APIRouter()


@router.get("/{uid}", response_model=list[Relation])
async def list_relations(uid: str, backend: RelationBackendDep):
    return await backend.list_relations(uid)


@router.post("/requests/{relation_id}/confirm", response_model=Relation)
async def confirm_relation(relation_id: str, backend: RelationBackendDep):
    try:
        return await backend.confirm_relation(relation_id)
    except RelationNotFound as exc:
        raise HTTPException(404, "Relation not found") from exc
