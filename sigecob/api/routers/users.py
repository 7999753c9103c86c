# sigecob/api/routers/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sigecob.api.errors import http_error
from sigecob.data.database import get_db
from sigecob.domain.errors import ShopError
from sigecob.domain.schemas import UserCreate, UserRead
from sigecob.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.create_user(payload)
    except ShopError as e:
        raise http_error(e)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.get_user(user_id)
    except ShopError as e:
        raise http_error(e)
