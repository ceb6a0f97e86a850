# charnoks/routers/users.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from charnoks.database import get_db
from charnoks.core.auth import get_current_user, get_owner_user
from charnoks.models.users import User
from charnoks.schemas.user import RoleUpdate, UserResponse

router = APIRouter(prefix="/users", tags=["Users"])

logger = logging.getLogger(__name__)


@router.get("/me", response_model=UserResponse)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("", response_model=list[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    owner: User = Depends(get_owner_user),
):
    return db.query(User).order_by(User.id.asc()).all()


@router.put("/{user_id}/role", response_model=UserResponse)
def set_user_role(
    user_id: int,
    role_data: RoleUpdate,
    db: Session = Depends(get_db),
    owner: User = Depends(get_owner_user),
):
    user = db.query(User).filter(User.id == user_id).first()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    user.role = role_data.role
    db.commit()
    db.refresh(user)

    logger.info("Owner %s set role of user %s to %s", owner.id, user.id, user.role)
    return user
