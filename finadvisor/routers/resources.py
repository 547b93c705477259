# finadvisor/routers/resources.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..crud import OwnedResourceService, ResourceKind
from ..database import get_db
from ..responses import envelope, serialize, serialize_many
from ..security import Identity, get_current_identity


def build_router(kind: ResourceKind) -> APIRouter:
    """GET/POST /api/<path> and PUT/DELETE /api/<path>/{id} for one owned resource."""
    router = APIRouter(prefix=f"/api/{kind.path}", tags=[kind.label])
    service = OwnedResourceService(kind)

    @router.get("")
    def list_records(
        identity: Identity = Depends(get_current_identity),
        db: Session = Depends(get_db),
    ):
        return envelope(serialize_many(kind.out_schema, service.list(db, identity.id)))

    @router.post("", status_code=201)
    def create_record(
        payload: kind.create_schema,
        identity: Identity = Depends(get_current_identity),
        db: Session = Depends(get_db),
    ):
        record = service.create(db, identity.id, payload)
        return envelope(serialize(kind.out_schema, record))

    @router.put("/{record_id}")
    def update_record(
        record_id: str,
        payload: kind.create_schema,
        identity: Identity = Depends(get_current_identity),
        db: Session = Depends(get_db),
    ):
        record = service.update(db, identity.id, record_id, payload)
        return envelope(serialize(kind.out_schema, record))

    @router.delete("/{record_id}")
    def delete_record(
        record_id: str,
        identity: Identity = Depends(get_current_identity),
        db: Session = Depends(get_db),
    ):
        service.delete(db, identity.id, record_id)
        return envelope(message=f"{kind.label} removed")

    return router
