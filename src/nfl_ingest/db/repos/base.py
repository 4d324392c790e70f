from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from nfl_ingest.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    def __init__(self, session: Session, model: type[ModelT]) -> None:
        self.session = session
        self.model = model

    def insert(self, obj: ModelT, *, flush: bool = True) -> ModelT:
        self.session.add(obj)
        if flush:
            self.session.flush()  # assigns PKs, etc.
        return obj

    def get(self, id_: Any) -> ModelT | None:
        return self.session.get(self.model, id_)

    def first_where(self, *predicates: ColumnElement[bool]) -> ModelT | None:
        stmt = select(self.model).where(*predicates).limit(1)
        return self.session.execute(stmt).scalars().first()

    def all_where(self, *predicates: ColumnElement[bool]) -> list[ModelT]:
        stmt = select(self.model).where(*predicates)
        return list(self.session.execute(stmt).scalars().all())

    def list(self, *, offset: int = 0, limit: int | None = None) -> list[ModelT]:
        stmt = select(self.model).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def count(self) -> int:
        stmt = select(func.count()).select_from(self.model)
        return int(self.session.execute(stmt).scalar_one())

    def update(self, obj: ModelT, changes: Mapping[str, Any], *, flush: bool = True) -> bool:
        """Overwrite fields on ``obj`` (latest wins, None included).

        Returns True when at least one value actually changed.
        """
        changed = False
        for k, v in changes.items():
            if getattr(obj, k) != v:
                setattr(obj, k, v)
                changed = True
        if flush and changed:
            self.session.flush()
        return changed

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
