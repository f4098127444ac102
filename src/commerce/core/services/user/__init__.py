from .data_seeder import DataSeeder
from .user_service import UserService, cascade_action_for

__all__ = ["DataSeeder", "UserService", "cascade_action_for"]
