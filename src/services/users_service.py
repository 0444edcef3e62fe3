"""
Users service - operations on the users table
"""

import logging
from fastapi import Depends, Request

from database.connection import DatabaseClient
from services.base_service import BaseService, ServiceResult

logger = logging.getLogger(__name__)

USERS_TABLE = "users"


class UsersService(BaseService):
    """Service for user management operations"""

    def __init__(self, client):
        super().__init__(client, USERS_TABLE)

    async def list_users(self) -> ServiceResult:
        return await self.read()

    async def create_user(self, name: str, email: str) -> ServiceResult:
        logger.info(f"Creating new user: {email}")
        return await self.create({"name": name, "email": email})

    async def update_user(self, user_id: str, name: str, email: str) -> ServiceResult:
        logger.info(f"Updating user {user_id}")
        return await self.update(user_id, {"name": name, "email": email})

    async def delete_user(self, user_id: str) -> ServiceResult:
        logger.info(f"Deleting user {user_id}")
        return await self.delete(user_id)


def get_db_client(request: Request) -> DatabaseClient:
    """Database client created by the application at startup"""
    return request.app.state.db_client


def get_users_service(client: DatabaseClient = Depends(get_db_client)) -> UsersService:
    return UsersService(client)
