from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sigecob.data.models.cart import CartModel
from sigecob.data.models.user import UserModel
from sigecob.domain.enums import UserRole
from sigecob.domain.errors import Conflict, Forbidden, NotFound, Unauthorized
from sigecob.domain.schemas import UserCreate, UserRead
from sigecob.repos.cart_repo import CartRepo
from sigecob.repos.user_repo import UserRepo
from sigecob.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        if self.repo.get_by_email(payload.email):
            raise Conflict("Ya existe un usuario con este correo electrónico.")

        #user and cart are created together; the cart lives as long as the user
        user = UserModel(name=payload.name, email=payload.email, role=payload.role.value)
        try:
            self.repo.create_user(user)
            CartRepo(self.db).create_cart(CartModel(user_id=user.id))
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Ya existe un usuario con este correo electrónico.")

        logger.info(f"User {user.id} registered with role {user.role}")
        return UserRead.model_validate(user)

    def get_user(self, user_id: int) -> UserRead:
        return UserRead.model_validate(self.get_model(user_id))

    def get_model(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound("Usuario no encontrado.")
        return user

    def get_actor(self, user_id: int) -> UserModel:
        """The user an action is performed as; an unknown id is not a valid identity."""
        user = self.repo.get_user(user_id)
        if not user:
            raise Unauthorized("Usuario no autenticado o inexistente.")
        return user

    def require_role(self, user_id: int, *roles: UserRole) -> UserModel:
        user = self.get_actor(user_id)
        if user.role not in {r.value for r in roles}:
            raise Forbidden("No tienes permiso para realizar esta acción.")
        return user
