import hmac

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session

from charnoks.database import get_db
from charnoks.models.users import User, ROLE_OWNER
from charnoks.core.config import settings

router = APIRouter(prefix="/internal", tags=["Internal"])

@router.post("/promote-owner")
def promote_owner(
    email: str,
    secret: str,
    db: Session = Depends(get_db),
):
    # Bootstraps the first owner; later promotions go through PUT /users/{id}/role
    if not hmac.compare_digest(secret.encode("utf-8"), settings.INTERNAL_ADMIN_SECRET.encode("utf-8")):
        raise HTTPException(status_code=403, detail="Unauthorized")

    user = db.query(User).filter(User.email == email).first()

    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user.role = ROLE_OWNER
    db.commit()

    return {"message": f"{email} promoted to owner"}
