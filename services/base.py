"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject mock services for testing.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config is ignored.
        llm_provider: Optional LLM provider for testing. If None, one is built from config.
    """

    def __init__(self, config: Config, db_manager=None, llm_provider=None):
        """Initialize services with configuration.

        Args:
            config: Config object containing application configuration.
            db_manager: Optional database manager for dependency injection (testing).
                       If None, creates DatabaseManager from config.
            llm_provider: Optional LLM provider for dependency injection (testing).
                         If None, created from config (None when LLM is disabled).
        """
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.categories import CategoryService
        from services.patterns import PatternService
        from services.transactions import TransactionService
        from services.categorization import CategorizationService
        from categorization.remote import RemoteClassifier
        from llm import try_get_llm_provider

        if llm_provider is None:
            llm_provider = try_get_llm_provider(config)

        self.categories = CategoryService(self.db_manager)
        self.patterns = PatternService(self.db_manager)
        self.transactions = TransactionService(self.db_manager)
        self.categorizer = CategorizationService(
            self.categories,
            self.patterns,
            self.transactions,
            RemoteClassifier(llm_provider),
        )
