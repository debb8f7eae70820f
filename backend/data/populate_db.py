import csv
import os

from sqlalchemy.orm import sessionmaker

from .database import SessionLocal, create_tables
from .models import ArtItem, MenuItem, Workshop
from ..utils.logger import get_logger

logger = get_logger()

RAW_DIR = os.path.join(os.path.dirname(__file__), "raw")
MENU_CSV_PATH = os.path.join(RAW_DIR, "menu.csv")
ART_CSV_PATH = os.path.join(RAW_DIR, "art.csv")
WORKSHOPS_CSV_PATH = os.path.join(RAW_DIR, "workshops.csv")


def _read_rows(path):
    with open(path, mode='r', encoding='utf-8') as csvfile:
        return list(csv.DictReader(csvfile))


def _menu_item(row):
    return MenuItem(
        id=row['id'],
        name=row['name'],
        category=row['category'],
        price=float(row['price']),
        caffeine=row['caffeine'] or None,
        description=row['description'],
        tags=row['tags'],
    )


def _art_item(row):
    return ArtItem(
        id=row['id'],
        title=row['title'],
        artist=row['artist'],
        price=float(row['price']),
        status=row['status'],
        stock=int(row['stock']),
    )


def _workshop(row):
    return Workshop(
        id=row['id'],
        title=row['title'],
        datetime=row['datetime'],
        seats=int(row['seats']),
        booked=int(row['booked']),
        price=float(row['price']),
    )


SEEDS = (
    (MenuItem, MENU_CSV_PATH, _menu_item),
    (ArtItem, ART_CSV_PATH, _art_item),
    (Workshop, WORKSHOPS_CSV_PATH, _workshop),
)


def populate_catalog(session_factory: sessionmaker = None, bind=None) -> dict:
    """Seed every empty catalog table from the CSVs in ``raw/``.

    Tables that already hold rows are left alone. Returns the number of rows
    inserted per table.
    """
    if bind is None and session_factory is not None:
        bind = session_factory.kw.get("bind")
    # Ensure tables are created
    create_tables(bind)

    db = (session_factory or SessionLocal)()
    inserted = {}
    try:
        for model, path, build in SEEDS:
            table = model.__tablename__
            if db.query(model).count() > 0:
                logger.info(f"{table} table is not empty. Skipping population.")
                inserted[table] = 0
                continue
            rows = [build(row) for row in _read_rows(path)]
            db.add_all(rows)
            inserted[table] = len(rows)
        db.commit()
        logger.info(f"Seeded catalog: {inserted}")
        return inserted
    except Exception:
        db.rollback()
        logger.exception("Error populating catalog tables")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    populate_catalog()
