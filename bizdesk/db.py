"""Database session utilities.

The storage engine is an explicit object: the application factory (or the
CLI) builds one ``Database`` at startup and hands it to whoever needs it.
Tests build their own isolated instances.
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from .config import settings
from .models import Base


def _is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


class Database:
    """Engine + session factory for one storage backend."""

    def __init__(self, url: Optional[str] = None, *, echo: bool = False):
        self.url = url or settings.DATABASE_URL

        engine_kwargs = {}
        if _is_memory_url(self.url):
            # One shared connection, otherwise every checkout sees an empty db.
            engine_kwargs = {
                "connect_args": {"check_same_thread": False},
                "poolclass": StaticPool,
            }

        self.engine = create_engine(self.url, future=True, echo=echo, **engine_kwargs)

        # Objects stay readable after the session closes (route serialization).
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            future=True,
        )

    @property
    def is_memory(self) -> bool:
        return _is_memory_url(self.url)

    def create_all(self) -> None:
        """Create every table that does not exist yet."""
        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def get_db(self) -> Generator[Session, None, None]:
        """
        Yield a SQLAlchemy Session and always close it.

        We commit on success, rollback on error, and close in all cases.
        """
        db: Session = self.SessionLocal()
        try:
            yield db
            db.commit()          # no-op if nothing was changed
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
