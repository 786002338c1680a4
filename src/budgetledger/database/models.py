"""SQLAlchemy models for budgetledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class Owner(Base):
    """Ledger owner model."""

    __tablename__ = "owners"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    accounts = relationship("Account", back_populates="owner")


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False)
    name = Column(String, nullable=False)
    bank_name = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("owner_id", "name", name="uq_owner_account_name"),)

    owner = relationship("Owner", back_populates="accounts")


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class Payee(Base):
    """Payee model."""

    __tablename__ = "payees"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class LedgerEntry(Base):
    """Ledger entry model.

    ``linked_entry_id`` is a plain self-referencing column; both legs of a
    transfer point at each other, so rows are unlinked before deletion.
    """

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    payee_id = Column(Integer, ForeignKey("payees.id"), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=False, default="")
    notes = Column(String, nullable=True)
    date = Column(Date, nullable=False)
    value_date = Column(Date, nullable=True)
    purchase_date = Column(Date, nullable=True)
    accounting_date = Column(Date, nullable=True)
    type = Column(String, nullable=False)
    status = Column(String, nullable=False, default="pending")
    is_reconciled = Column(Boolean, nullable=False, default=False)
    reconciled_at = Column(DateTime, nullable=True)
    linked_entry_id = Column(Integer, ForeignKey("ledger_entries.id"), nullable=True)
    import_id = Column(Integer, ForeignKey("import_batches.id"), nullable=True)
    import_hash = Column(String, nullable=True)
    check_number = Column(String, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # NULL hashes never collide, so manual entries are unaffected
    __table_args__ = (UniqueConstraint("account_id", "import_hash", name="uq_account_import_hash"),)


class ImportBatch(Base):
    """Import batch model."""

    __tablename__ = "import_batches"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    filename = Column(String, nullable=True)
    file_type = Column(String, nullable=False, default="csv")
    status = Column(String, nullable=False, default="analyzed")
    total_rows = Column(Integer, nullable=False, default=0)
    imported_count = Column(Integer, nullable=False, default=0)
    merged_count = Column(Integer, nullable=False, default=0)
    duplicate_count = Column(Integer, nullable=False, default=0)
    skipped_count = Column(Integer, nullable=False, default=0)
    error_count = Column(Integer, nullable=False, default=0)
    config = Column(JSON, nullable=False, default=dict)
    records = Column(JSON, nullable=False, default=list)
    processing_log = Column(JSON, nullable=False, default=list)
    error_details = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=_now, nullable=False)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)


def _enable_sqlite_transactions(engine) -> None:
    """Let SQLAlchemy own BEGIN so SAVEPOINTs work, and enforce foreign keys."""

    @event.listens_for(engine, "connect")
    def on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_transactions(engine)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
