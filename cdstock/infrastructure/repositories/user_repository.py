"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from cdstock.domain.entities import User, UserRole
from cdstock.infrastructure.models import UserModel
from cdstock.utils import ensure_app_naive_datetime, ensure_app_timezone, new_id

from .base import backend_call


class UserRepository:
    """Provide CRUD operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self, skip: int = 0, limit: int | None = 100) -> Sequence[User]:
        with backend_call(self.session, "list users"):
            query = (
                self.session.query(UserModel)
                .filter(UserModel.deleted.is_(False))
                .order_by(UserModel.created_at.desc(), UserModel.id)
                .offset(skip)
            )
            if limit is not None:
                query = query.limit(limit)
            return [self._to_entity(model) for model in query.all()]

    def get(self, user_id: str, *, include_deleted: bool = False) -> User | None:
        model = self._get_model(include_deleted=include_deleted, id=user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str, *, include_deleted: bool = False) -> User | None:
        with backend_call(self.session, "load user"):
            query = self.session.query(UserModel).filter(
                func.lower(UserModel.email) == email.strip().lower()
            )
            if not include_deleted:
                query = query.filter(UserModel.deleted.is_(False))
            model = query.first()
        return self._to_entity(model) if model else None

    def list_ids(self, *, exclude: Iterable[str] = ()) -> list[str]:
        """Return the ids of every non-deleted user except ``exclude``."""

        excluded = set(exclude)
        with backend_call(self.session, "list user ids"):
            query = (
                self.session.query(UserModel.id)
                .filter(UserModel.deleted.is_(False))
                .order_by(UserModel.created_at, UserModel.id)
            )
            return [user_id for (user_id,) in query.all() if user_id not in excluded]

    def list_ids_by_roles(self, roles: Iterable[UserRole]) -> list[str]:
        values = [UserRole.parse(role).value for role in roles]
        with backend_call(self.session, "list user ids"):
            query = (
                self.session.query(UserModel.id)
                .filter(UserModel.deleted.is_(False))
                .filter(UserModel.role.in_(values))
                .order_by(UserModel.created_at, UserModel.id)
            )
            return [user_id for (user_id,) in query.all()]

    def create(self, user: User) -> User:
        model = UserModel()
        self._apply_entity_to_model(model, user, include_creation_fields=True)
        with backend_call(self.session, "create user"):
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def update(self, user: User) -> User:
        model = self._get_model(include_deleted=True, id=user.id)
        if not model:
            msg = f"User with id {user.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, user, include_creation_fields=False)
        with backend_call(self.session, "update user"):
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, user_id: str) -> None:
        """Soft delete the user; messages keep referencing the id."""

        model = self._get_model(include_deleted=True, id=user_id)
        if not model:
            msg = f"User with id {user_id} not found"
            raise ValueError(msg)

        if model.deleted:
            return

        model.deleted = True
        with backend_call(self.session, "delete user"):
            self.session.add(model)
            self.session.commit()

    def _get_model(self, include_deleted: bool = False, **filters) -> UserModel | None:
        with backend_call(self.session, "load user"):
            query = self.session.query(UserModel)
            if not include_deleted:
                query = query.filter(UserModel.deleted.is_(False))
            return query.filter_by(**filters).first()

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            name=model.name,
            role=UserRole.parse(model.role),
            password=model.password,
            phone=model.phone,
            profile_picture=model.profile_picture,
            is_blocked=bool(model.is_blocked),
            deleted=bool(model.deleted),
            last_login=ensure_app_timezone(model.last_login),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )

    @staticmethod
    def _apply_entity_to_model(
        model: UserModel, user: User, *, include_creation_fields: bool
    ) -> None:
        if include_creation_fields:
            model.id = user.id or new_id()
            if user.created_at is not None:
                model.created_at = ensure_app_naive_datetime(user.created_at)
        model.email = user.email
        model.name = user.name
        model.phone = user.phone
        model.profile_picture = user.profile_picture
        model.role = UserRole.parse(user.role).value
        model.password = user.password
        model.is_blocked = user.is_blocked
        model.deleted = user.deleted
        model.last_login = ensure_app_naive_datetime(user.last_login)


__all__ = ["UserRepository"]
