"""Read-only catalog store over the SQLAlchemy models.

Every read is submitted to a small worker pool and awaited with a timeout so
a stuck database can never hang a chat turn; a timeout and a database error
both surface as ``CatalogQueryError``.
"""
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Callable, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..app.config import Config
from ..schemas.io_models import ArtItem, CatalogItem, Workshop
from ..utils.logger import get_logger
from . import models
from .database import SessionLocal
from .query_spec import QuerySpec

logger = get_logger("catalog")

T = TypeVar("T")

AVAILABLE = "Available"


class CatalogQueryError(Exception):
    """A catalog read failed or did not finish in time."""


def to_catalog_item(row: models.MenuItem) -> CatalogItem:
    return CatalogItem(
        id=row.id,
        name=row.name,
        category=row.category,
        price=row.price,
        caffeine_level=row.caffeine or None,
        tags=row.tag_list(),
    )


def to_art_item(row: models.ArtItem) -> ArtItem:
    return ArtItem(
        id=row.id,
        title=row.title,
        artist=row.artist,
        price=row.price,
        available=row.status == AVAILABLE and (row.stock or 0) > 0,
    )


def to_workshop(row: models.Workshop) -> Workshop:
    return Workshop(
        id=row.id,
        title=row.title,
        datetime=row.datetime,
        seats=row.seats,
        booked=row.booked,
        price=row.price,
    )


class CatalogStore:
    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        timeout: Optional[float] = None,
        max_workers: Optional[int] = None,
    ):
        self.session_factory = session_factory or SessionLocal
        self.timeout = timeout if timeout is not None else Config.CATALOG_TIMEOUT_SECONDS
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or Config.CATALOG_WORKERS,
            thread_name_prefix="catalog-read",
        )

    def list_menu_items(self, spec: Optional[QuerySpec] = None) -> List[CatalogItem]:
        """Rows matching ``spec``; the whole menu in id order when no spec is given."""
        def read(db: Session) -> List[CatalogItem]:
            query = db.query(models.MenuItem)
            if spec is None:
                return [to_catalog_item(r) for r in query.order_by(models.MenuItem.id).all()]
            where = spec.where(models.MenuItem)
            if where is not None:
                query = query.filter(where)
            rows = query.order_by(*spec.order(models.MenuItem)).limit(spec.limit).all()
            return [to_catalog_item(r) for r in rows]

        return self._run("list_menu_items", read)

    def list_art_items(self, available_only: bool = True) -> List[ArtItem]:
        def read(db: Session) -> List[ArtItem]:
            query = db.query(models.ArtItem)
            if available_only:
                query = query.filter(models.ArtItem.status == AVAILABLE, models.ArtItem.stock > 0)
            return [to_art_item(r) for r in query.order_by(models.ArtItem.id).all()]

        return self._run("list_art_items", read)

    def list_workshops(self) -> List[Workshop]:
        def read(db: Session) -> List[Workshop]:
            rows = db.query(models.Workshop).order_by(models.Workshop.id).all()
            return [to_workshop(r) for r in rows]

        return self._run("list_workshops", read)

    def close(self) -> None:
        self._executor.shutdown(wait=False)

    def _run(self, operation: str, read: Callable[[Session], T]) -> T:
        future = self._executor.submit(self._with_session, read)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeoutError as exc:
            future.cancel()
            raise CatalogQueryError(f"{operation} timed out after {self.timeout}s") from exc
        except SQLAlchemyError as exc:
            raise CatalogQueryError(f"{operation} failed: {exc}") from exc

    def _with_session(self, read: Callable[[Session], T]) -> T:
        db = self.session_factory()
        try:
            return read(db)
        finally:
            db.close()
