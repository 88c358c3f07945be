"""
Modelos de base de datos (ORM).
"""
from sqlalchemy import Column, String, Integer, DateTime, Index
from sqlalchemy.sql import func

from timetable_sync.infrastructure.database.session import Base


class TimetableModel(Base):
    """
    Modelo de base de datos para el horario.

    Cada sincronizacion reemplaza por completo los registros de los grupos
    presentes en la hoja; los grupos ausentes conservan sus registros.
    """
    
    __tablename__ = "timetable"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    course = Column(String(255), nullable=True)
    group = Column(String(255), nullable=False, index=True)
    # Medianoche UTC del dia de la clase
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    time = Column(String(64), nullable=False)
    subject = Column(String(512), nullable=False)
    lesson_type = Column(String(255), nullable=True)
    teacher_name = Column(String(255), nullable=True)
    lesson_format = Column(String(255), nullable=True)
    location = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_timetable_group_date", "group", "date"),
    )
    
    def __repr__(self):
        return f"<Timetable(id={self.id}, group={self.group}, date={self.date}, time={self.time})>"
