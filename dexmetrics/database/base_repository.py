# dexmetrics/database/base_repository.py

from typing import TypeVar, Generic, Type
from sqlalchemy.orm import Session

from ..core.logging import EngineLogger


T = TypeVar('T')

class BaseRepository(Generic[T]):
    def __init__(self, db_manager, model_class: Type[T]):
        self.db_manager = db_manager
        self.model_class = model_class
        self.logger = EngineLogger.get_logger(f'database.repository.{model_class.__tablename__}')

    def create(self, session: Session, **kwargs) -> T:
        try:
            instance = self.model_class(**kwargs)
            session.add(instance)
            session.flush()
            return instance
        except Exception as e:
            self.logger.error(f"Error creating {self.model_class.__name__}: {e}")
            raise

    def add(self, session: Session, instance: T) -> T:
        try:
            session.add(instance)
            session.flush()
            return instance
        except Exception as e:
            self.logger.error(f"Error adding {self.model_class.__name__}: {e}")
            raise

    def count(self, session: Session) -> int:
        try:
            return session.query(self.model_class).count()
        except Exception as e:
            self.logger.error(f"Error counting {self.model_class.__name__}: {e}")
            raise
