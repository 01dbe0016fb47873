"""Document store over a SQLAlchemy session."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from blog_api.errors import StoreError

# Configure logging
logger = logging.getLogger(__name__)

T = TypeVar("T")


class DocumentStore:
    """
    Find, save and delete whole documents.

    Every read-then-write is last-writer-wins: no version column is checked.
    Any SQLAlchemy failure rolls the session back and surfaces as StoreError.
    """

    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, model: Type[T], doc_id: Any) -> Optional[T]:
        try:
            return self.session.get(model, doc_id)
        except SQLAlchemyError as e:
            self._fail(f"Error loading {model.__name__} {doc_id}", e)

    def find(
        self,
        model: Type[T],
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[T]:
        """
        Return documents matching equality filters.

        Args:
            model: Mapped class to query
            filters: Attribute name to value, combined with AND
            order_by: Attribute name to sort on
            descending: Sort direction for order_by

        Returns:
            List of matching documents
        """
        try:
            query = self.session.query(model)
            if filters:
                query = query.filter_by(**filters)
            if order_by:
                # id breaks ties between documents written in the same instant
                columns = (getattr(model, order_by), model.id)
                if descending:
                    query = query.order_by(*(column.desc() for column in columns))
                else:
                    query = query.order_by(*(column.asc() for column in columns))
            return query.all()
        except SQLAlchemyError as e:
            self._fail(f"Error querying {model.__name__}", e)

    def find_by_ids(self, model: Type[T], doc_ids: Iterable[Any]) -> Dict[Any, T]:
        """Return a mapping of id to document for every id that exists."""
        doc_ids = set(doc_ids)
        if not doc_ids:
            return {}
        try:
            docs = self.session.query(model).filter(model.id.in_(doc_ids)).all()
        except SQLAlchemyError as e:
            self._fail(f"Error querying {model.__name__}", e)
        return {doc.id: doc for doc in docs}

    def find_one(self, model: Type[T], **filters: Any) -> Optional[T]:
        try:
            return self.session.query(model).filter_by(**filters).first()
        except SQLAlchemyError as e:
            self._fail(f"Error querying {model.__name__}", e)

    def save(self, doc: T) -> T:
        try:
            self.session.add(doc)
            self.session.commit()
            self.session.refresh(doc)
            return doc
        except IntegrityError as e:
            self._fail(f"Constraint violation saving {type(doc).__name__}", e)
        except SQLAlchemyError as e:
            self._fail(f"Error saving {type(doc).__name__}", e)

    def delete_by_id(self, model: Type[T], doc_id: Any) -> None:
        try:
            doc = self.session.get(model, doc_id)
            if doc is not None:
                self.session.delete(doc)
                self.session.commit()
        except SQLAlchemyError as e:
            self._fail(f"Error deleting {model.__name__} {doc_id}", e)

    def _fail(self, message: str, error: Exception):
        logger.error(f"{message}: {error}")
        self.session.rollback()
        raise StoreError(message) from error
