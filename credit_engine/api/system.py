"""
Engine system wiring and FastAPI dependencies
"""

from typing import Optional

from ..audit import AuditTrail
from ..calendar_service import Calendar
from ..config import EngineConfig, get_config, sqlite_path_from_url
from ..credit_book import CreditBook
from ..due_manager import CreditDueManager
from ..pool_config import PoolConfig
from ..storage import InMemoryStorage, SQLiteStorage, StorageInterface


class EngineSystem:
    """Credit engine with all components initialized"""

    def __init__(
        self,
        engine_config: Optional[EngineConfig] = None,
        storage: Optional[StorageInterface] = None
    ):
        engine_config = engine_config or get_config()

        if storage is None:
            if engine_config.use_in_memory_storage:
                storage = InMemoryStorage()
            else:
                storage = SQLiteStorage(sqlite_path_from_url(engine_config.database_url))
        self.storage = storage

        self.pool_config = PoolConfig.from_config(engine_config)
        self.calendar = Calendar()
        self.due_manager = CreditDueManager(self.pool_config, self.calendar)
        self.audit_trail = AuditTrail(self.storage) if engine_config.enable_audit_logging else None
        self.credit_book = CreditBook(self.storage, self.due_manager, self.audit_trail)


# Global engine system instance, created on first use
engine_system: Optional[EngineSystem] = None


# Dependency to get engine system
def get_engine_system() -> EngineSystem:
    global engine_system
    if engine_system is None:
        engine_system = EngineSystem()
    return engine_system
