from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from blogo.config import DATABASE_URL, DB_RETRY_ATTEMPTS, DB_RETRY_MAX_WAIT, DB_RETRY_MIN_WAIT
from blogo.models import Base

engine = create_engine(DATABASE_URL, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

# Transient connection failures only; domain errors raised inside a read must not be retried.
db_retry = retry(
    retry=retry_if_exception_type(OperationalError),
    stop=stop_after_attempt(DB_RETRY_ATTEMPTS),
    wait=wait_exponential(multiplier=1, min=DB_RETRY_MIN_WAIT, max=DB_RETRY_MAX_WAIT),
    reraise=True,
)


def session_scope(factory: sessionmaker):
    """Build a transactional context manager over ``factory``."""

    @contextmanager
    def scope() -> Session:
        session = factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return scope


get_session = session_scope(SessionLocal)


def init_db(bind=None) -> None:
    """Create all tables if they don't exist (idempotent)."""
    Base.metadata.create_all(bind or engine)
