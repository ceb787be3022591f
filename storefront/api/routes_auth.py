from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.db.deps import get_db
from storefront.schemas.common import Envelope, ok
from storefront.schemas.user import Token, UserLogin, UserOut, UserRegister
from storefront.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", response_model=Envelope[UserOut], status_code=201)
def register(data: UserRegister, db: Session = Depends(get_db)):
    """Create an account with the base role; any role in the body is ignored."""
    user = AuthService(db).register(data.model_dump())
    return ok(UserOut.model_validate(user), "User registered successfully")


@router.post("/login", response_model=Envelope[Token])
def login(data: UserLogin, db: Session = Depends(get_db)):
    result = AuthService(db).login(data.email, data.password)
    token = Token(token=result["token"], user=UserOut.model_validate(result["user"]))
    return ok(token, "User logged in successfully")
