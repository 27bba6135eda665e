"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager
from db.persistence import SQLitePersistence


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject a test database or persistence layer.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config is
            not used to locate the database.
        persistence: Optional persistence collaborator. Defaults to SQLite
            persistence over db_manager.
    """

    def __init__(self, config: Config, db_manager=None, persistence=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)
        self.persistence = persistence or SQLitePersistence(self.db_manager)

        # Lazy import to avoid circular dependencies
        from services.transactions import TransactionService
        from services.budget import BudgetService
        from services.backups import BackupService

        self.transactions = TransactionService(self.persistence)
        self.budget = BudgetService(self.persistence)
        self.backups = BackupService(self.transactions)

    def load(self) -> "Services":
        """Load persisted transactions into the store."""
        self.transactions.load()
        return self
