from core.database import Base
from sqlalchemy import (Column, Integer, String, Boolean, Date)
from .mixins import CreatedAtMixin

class Todo(Base, CreatedAtMixin):
    __tablename__ = "todos"

    #pk
    tno = Column(Integer, primary_key=True, index=True)

    title = Column(String, nullable=False)
    writer = Column(String, nullable=False)
    complete = Column(Boolean, default=False, nullable=False)
    due_date = Column(Date)
