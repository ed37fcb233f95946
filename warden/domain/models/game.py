"""Catalog entry. Maps to the 'games' table."""

from sqlalchemy import Column, Integer, String, Text

from warden.infrastructure.database import Base

ALL_CATEGORIES = "All"


class Game(Base):
    __tablename__ = "games"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    image_url = Column(Text, nullable=False)
    download_url = Column(Text, nullable=False)
    category = Column(String(50), nullable=False, index=True)  # Android, PC, Programs
    developer = Column(Text, nullable=True)  # e.g. "From: FitGirl"
    description = Column(Text, nullable=True)
    youtube_url = Column(Text, nullable=True)
    order = Column(Integer, nullable=False, default=0, server_default="0")

    def __repr__(self):
        return f"<Game {self.id} - {self.title}>"
