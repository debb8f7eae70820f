from sqlalchemy import Column, Integer, String, Float

from .database import Base


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    price = Column(Float, nullable=False)
    caffeine = Column(String)  # High / Very High / Extreme, empty for food
    description = Column(String)
    tags = Column(String, default="")  # comma separated, e.g. "cold, strong, black"

    def tag_list(self):
        return [t.strip() for t in (self.tags or "").split(",") if t.strip()]


class ArtItem(Base):
    __tablename__ = "art_items"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    artist = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    status = Column(String, nullable=False, default="Available")  # Available / Sold
    stock = Column(Integer, nullable=False, default=1)


class Workshop(Base):
    __tablename__ = "workshops"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    datetime = Column(String, nullable=False)  # display string, e.g. "Oct 24, 10:00 AM"
    seats = Column(Integer, nullable=False)
    booked = Column(Integer, nullable=False, default=0)
    price = Column(Float, nullable=False, default=0)
