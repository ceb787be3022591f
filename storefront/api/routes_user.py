from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.authz import Action, enforce
from storefront.core.security import Identity
from storefront.db.deps import get_current_identity, get_db, require
from storefront.schemas.common import Envelope, ok
from storefront.schemas.user import RoleUpdate, UserOut, UserProfileUpdate
from storefront.services.user_service import UserService

router = APIRouter()


@router.get("", response_model=Envelope[List[UserOut]])
def list_users(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require(Action.list_users)),
):
    return ok([UserOut.model_validate(u) for u in UserService(db).list_users()])


@router.get("/me", response_model=Envelope[UserOut])
def read_me(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require(Action.read_own_identity)),
):
    return ok(UserOut.model_validate(UserService(db).get_user(identity.id)))


@router.get("/by-email/{email}", response_model=Envelope[UserOut])
def get_user_by_email(
    email: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require(Action.list_users)),
):
    return ok(UserOut.model_validate(UserService(db).get_user_by_email(email)))


@router.get("/{user_id}", response_model=Envelope[UserOut])
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    enforce(identity, Action.read_profile, owner_id=user_id)
    return ok(UserOut.model_validate(UserService(db).get_user(user_id)))


@router.put("/{user_id}", response_model=Envelope[UserOut])
def update_user(
    user_id: int,
    data: UserProfileUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    enforce(identity, Action.update_profile, owner_id=user_id)
    user = UserService(db).update_profile(user_id, data.model_dump(exclude_unset=True))
    return ok(UserOut.model_validate(user), "Profile updated")


@router.patch("/{user_id}/role", response_model=Envelope[UserOut])
def change_role(
    user_id: int,
    data: RoleUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require(Action.change_role)),
):
    user = UserService(db).change_role(user_id, data.role)
    return ok(UserOut.model_validate(user), "User role updated.")


@router.delete("/{user_id}", response_model=Envelope[None])
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require(Action.delete_user)),
):
    UserService(db).delete_user(user_id)
    return ok(message="User deleted")
