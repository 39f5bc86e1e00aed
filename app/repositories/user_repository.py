from app.models.user import User
from typing import Dict, Iterable
import uuid

class UserRepository:
    async def get_many(self, user_ids: Iterable[uuid.UUID]) -> Dict[str, User]:
        """Пользователи по списку ID одним запросом, ключ - str(id). Отсутствующих в словаре нет"""
        ids = list({str(user_id) for user_id in user_ids})
        if not ids:
            return {}
        users = await User.filter(id__in=ids).all()
        return {str(user.id): user for user in users}
