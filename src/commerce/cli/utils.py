from rich.console import Console

from src.commerce.core.services.database.db_session import DbSessionService

console = Console()


def get_database_service() -> DbSessionService:
    return DbSessionService()
