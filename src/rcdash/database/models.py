"""SQLAlchemy models for rcdash database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Enum,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from rcdash.domain.entities import ERROR_CLASSES

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


def _error_class_column(nullable: bool) -> Column:
    return Column(
        Enum(*ERROR_CLASSES, name="error_class", native_enum=False, create_constraint=True),
        nullable=nullable,
    )


class Application(Base):
    """Application model."""

    __tablename__ = "applications"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    dictionary_entries = relationship(
        "DictionaryEntry", back_populates="application", cascade="all, delete-orphan"
    )
    success_rate_facts = relationship(
        "SuccessRateFact", back_populates="application", cascade="all, delete-orphan"
    )
    unmapped_codes = relationship(
        "UnmappedCode", back_populates="application", cascade="all, delete-orphan"
    )


class DictionaryEntry(Base):
    """Response code dictionary model."""

    __tablename__ = "rc_dictionary"

    id = Column(Integer, primary_key=True)
    application_id = Column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
    )
    transaction_type = Column(String(255), nullable=False, default="")
    response_code = Column(String(50), nullable=False, default="")
    description = Column(String(500), nullable=True)
    error_class = _error_class_column(nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "application_id", "transaction_type", "response_code", name="uq_dictionary_entry"
        ),
    )

    # Relationships
    application = relationship("Application", back_populates="dictionary_entries")


class SuccessRateFact(Base):
    """Success rate aggregate model."""

    __tablename__ = "success_rate_facts"

    id = Column(Integer, primary_key=True)
    application_id = Column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
    )
    date = Column(Date, nullable=False)
    month = Column(String(2), nullable=False)
    year = Column(Integer, nullable=False)
    transaction_type = Column(String(255), nullable=False)
    response_code = Column(String(50), nullable=True)
    description = Column(String(500), nullable=True)
    total_count = Column(Integer, nullable=True)
    total_amount = Column(Numeric(20, 2), nullable=True)
    total_fee = Column(Numeric(20, 2), nullable=True)
    status = Column(String(500), nullable=True)
    error_class = _error_class_column(nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # Relationships
    application = relationship("Application", back_populates="success_rate_facts")


class UnmappedCode(Base):
    """Response code without a dictionary entry, awaiting operator mapping."""

    __tablename__ = "unmapped_rc"

    id = Column(Integer, primary_key=True)
    application_id = Column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
    )
    transaction_type = Column(String(255), nullable=False, default="")
    response_code = Column(String(50), nullable=False)
    description = Column(String(500), nullable=True)
    status = Column(String(500), nullable=True)
    error_class = _error_class_column(nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "application_id", "transaction_type", "response_code", name="uq_unmapped_entry"
        ),
    )

    # Relationships
    application = relationship("Application", back_populates="unmapped_codes")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database_engine(database_url: str) -> Engine:
    """Create an engine, enabling foreign keys for SQLite.

    An in-memory SQLite URL gets a single shared connection so every session
    sees the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
        engine = create_engine(database_url, echo=False, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(database_url, echo=False, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory, creating tables if needed."""
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
