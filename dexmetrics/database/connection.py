# dexmetrics/database/connection.py

from typing import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, Engine, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool

from ..core.logging import EngineLogger, log_with_context, INFO, DEBUG, ERROR
from ..types.config import DatabaseConfig
from .base import Base


class DatabaseManager:
    def __init__(self, config: DatabaseConfig):
        if not config:
            raise ValueError("DatabaseConfig is required")

        self.config = config
        self.logger = EngineLogger.get_logger('database.manager')
        self._engine = None
        self._session_factory = None

        log_with_context(self.logger, DEBUG, "DatabaseManager created",
                         db_host=self._extract_host_from_url(config.url))

    @staticmethod
    def _extract_host_from_url(url: str) -> str:
        if '@' in url and '/' in url:
            return url.split('@', 1)[1].split('/')[0]
        return url.split(':', 1)[0]

    @property
    def is_sqlite(self) -> bool:
        return self.config.url.startswith("sqlite")

    def initialize(self) -> None:
        if self._engine is not None:
            self.logger.warning("Database already initialized")
            return

        try:
            self.logger.info("Initializing database engine")

            if self.is_sqlite:
                # single shared connection so in-memory databases survive across sessions and threads
                self._engine = create_engine(
                    self.config.url,
                    poolclass=StaticPool,
                    connect_args={"check_same_thread": False},
                    echo=False,
                )
            else:
                self._engine = create_engine(
                    self.config.url,
                    poolclass=QueuePool,
                    pool_size=self.config.pool_size,
                    max_overflow=self.config.max_overflow,
                    pool_timeout=self.config.pool_timeout,
                    pool_recycle=3600,
                    pool_pre_ping=True,
                    echo=False,
                )

            self._session_factory = sessionmaker(
                bind=self._engine,
                expire_on_commit=False,
            )

            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))

            log_with_context(self.logger, INFO, "Database initialized successfully",
                             pool_size=self.config.pool_size,
                             max_overflow=self.config.max_overflow)

        except Exception as e:
            log_with_context(self.logger, ERROR, "Failed to initialize database",
                             error=str(e))
            raise

    def create_tables(self) -> None:
        Base.metadata.create_all(self.engine)
        log_with_context(self.logger, INFO, "Database tables ensured",
                         tables=sorted(Base.metadata.tables.keys()))

    def shutdown(self) -> None:
        self.logger.info("Shutting down database connections")

        if self._engine:
            self._engine.dispose()
            self._engine = None

        self._session_factory = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._engine

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        if self._session_factory is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        session = self._session_factory()
        try:
            yield session
        except Exception as e:
            log_with_context(self.logger, ERROR, "Database session error, rolling back",
                             error=str(e))
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def get_transaction(self) -> Generator[Session, None, None]:
        with self.get_session() as session:
            yield session
            session.commit()
            log_with_context(self.logger, DEBUG, "Database transaction committed")

    def health_check(self) -> bool:
        try:
            with self.get_session() as session:
                session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            log_with_context(self.logger, ERROR, "Database health check failed",
                             error=str(e))
            return False
