"""
SQLAlchemy models for the database.
Maps domain entities to database tables.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Text,
    Numeric, Date, ForeignKey, JSON,
    Index, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class UserModel(Base):
    """Profile table; the id is the identity provider's user id."""
    __tablename__ = 'users'

    id = Column(String(36), primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    full_name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default='employee')
    hourly_rate = Column(Numeric(10, 2), default=50)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    created_projects = relationship("ProjectModel", back_populates="creator")
    time_entries = relationship("TimeEntryModel", back_populates="user")

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'employee')", name='check_user_role'),
    )


class ProjectModel(Base):
    """Project table"""
    __tablename__ = 'projects'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    client = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default='active')
    hourly_rate = Column(Numeric(10, 2), nullable=False, default=75)
    created_by = Column(String(36), ForeignKey('users.id'), nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    creator = relationship("UserModel", back_populates="created_projects")
    time_entries = relationship(
        "TimeEntryModel",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    invoice_dispatches = relationship(
        "InvoiceDispatchModel",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index('idx_projects_status', 'status'),
        Index('idx_projects_created_by', 'created_by'),
        CheckConstraint("status IN ('active', 'to-invoice', 'completed')", name='check_project_status'),
        CheckConstraint('hourly_rate > 0', name='check_project_rate_positive'),
    )


class TimeEntryModel(Base):
    """Time entry table"""
    __tablename__ = 'time_entries'

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False)
    user_id = Column(String(36), ForeignKey('users.id'), nullable=False)
    description = Column(Text, nullable=False)
    hours = Column(Numeric(6, 2), nullable=False)
    date = Column(Date, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    project = relationship("ProjectModel", back_populates="time_entries")
    user = relationship("UserModel", back_populates="time_entries")

    __table_args__ = (
        Index('idx_time_entries_project', 'project_id'),
        Index('idx_time_entries_user_date', 'user_id', 'date'),
        CheckConstraint('hours > 0', name='check_hours_positive'),
    )


class InvoiceDispatchModel(Base):
    """Invoices accepted by an external provider"""
    __tablename__ = 'invoice_dispatches'

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False)
    provider = Column(String(20), nullable=False)
    reference = Column(String(255), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    idempotency_key = Column(String(255), nullable=False, unique=True)
    payload = Column(JSON)
    sent_at = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    project = relationship("ProjectModel", back_populates="invoice_dispatches")

    __table_args__ = (
        Index('idx_invoice_dispatches_project', 'project_id'),
    )
