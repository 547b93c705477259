# finadvisor/routers/goals.py
from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..database import get_db
from ..errors import NotFoundError
from ..responses import envelope, serialize, serialize_many
from ..security import Identity, get_current_identity

router = APIRouter(prefix="/api/goals", tags=["Goals"])


# declared before /{goal_id} so they are not captured by it
@router.get("/test")
def goals_test():
    return envelope(message="Goal routes are working")


@router.get("/auth-test")
def goals_auth_test(identity: Identity = Depends(get_current_identity)):
    body = envelope(message="Authenticated goal route is working")
    body["user"] = asdict(identity)
    return body


@router.get("")
def list_goals(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return envelope(serialize_many(schemas.GoalOut, crud.list_goals(db, identity.id)))


@router.get("/{goal_id}")
def get_goal(
    goal_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    goal = crud.get_goal(db, identity.id, goal_id)
    if goal is None:
        raise NotFoundError("Goal not found")
    return envelope(serialize(schemas.GoalOut, goal))


@router.post("", status_code=201)
def create_goal(
    payload: schemas.GoalCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    goal = crud.create_goal(db, identity.id, payload)
    return envelope(serialize(schemas.GoalOut, goal))


@router.put("/{goal_id}")
def update_goal(
    goal_id: str,
    payload: schemas.GoalUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    goal = crud.update_goal(db, identity.id, goal_id, payload)
    return envelope(serialize(schemas.GoalOut, goal))


@router.patch("/{goal_id}/progress")
def update_goal_progress(
    goal_id: str,
    payload: schemas.GoalProgress,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    goal = crud.update_goal_progress(db, identity.id, goal_id, payload.current_amount)
    return envelope(serialize(schemas.GoalOut, goal))


@router.delete("/{goal_id}")
def delete_goal(
    goal_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    crud.delete_goal(db, identity.id, goal_id)
    return envelope({}, message="Goal removed")
