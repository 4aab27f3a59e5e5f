from sqlalchemy import Column, Integer, String
from ..core.database import Base


class Book(Base):
    __tablename__ = "books"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), unique=True, nullable=False)
    author = Column(String(255))
    publisher = Column(String(255))
    year = Column(Integer)
