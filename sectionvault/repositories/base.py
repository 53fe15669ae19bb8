"""Common repository plumbing: the session and primary-key lookups."""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from ..database import Base
from ..exceptions import SectionVaultError

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Repositories bind one model to one session.

    Subclasses set ``model_class``, and ``not_found_error`` when they expose
    ``get_by_id``.
    """

    model_class: Type[ModelT]
    not_found_error: Type[SectionVaultError]

    def __init__(self, db: Session):
        self.db = db

    def get_by_id_optional(self, entity_id: str) -> Optional[ModelT]:
        return self.db.get(self.model_class, entity_id)

    def get_by_id(self, entity_id: str) -> ModelT:
        """Like ``get_by_id_optional`` but raises ``not_found_error`` for a miss."""
        entity = self.get_by_id_optional(entity_id)
        if entity is None:
            raise self.not_found_error(entity_id)
        return entity
