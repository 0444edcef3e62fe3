"""
Base service layer for table-level database operations
"""

import logging
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

from database.query import QueryResult

logger = logging.getLogger(__name__)


@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def first(self) -> Optional[Dict[str, Any]]:
        return self.data[0] if self.data else None


class BaseService:
    """Base service that runs single-table operations through the database client"""

    def __init__(self, client, table_name: str, id_field: str = "id"):
        self.client = client
        self.table_name = table_name
        self.id_field = id_field

    def _to_service_result(self, operation: str, result: QueryResult) -> ServiceResult:
        if not result.ok:
            logger.error(f"{operation} operation failed for {self.table_name}: {result.error}")
            return ServiceResult(
                success=False,
                error=result.error.message,
                error_type=result.error.kind
            )
        return ServiceResult(success=True, data=result.data)

    async def read(self, filters: Optional[Dict[str, Any]] = None) -> ServiceResult:
        """
        Read records matching every equality filter

        Args:
            filters: Dictionary of {field_name: value}; empty reads the whole table

        Returns:
            ServiceResult with matched records
        """
        query = self.client.table(self.table_name).select("*")
        for field_name, value in (filters or {}).items():
            query = query.eq(field_name, value)
        return self._to_service_result("Read", await query.execute())

    async def create(self, data: Dict[str, Any]) -> ServiceResult:
        """
        Create a new record and return it

        Args:
            data: Dictionary of field values to insert

        Returns:
            ServiceResult with created record data
        """
        result = await self.client.table(self.table_name).insert([data]).select().execute()
        return self._to_service_result("Create", result)

    async def update(self, record_id: str, data: Dict[str, Any]) -> ServiceResult:
        """
        Update a record by primary key and return its post-image

        Args:
            record_id: Primary key value of record to update
            data: Dictionary of field values to update

        Returns:
            ServiceResult with updated record data; empty data when no row matched
        """
        result = await (
            self.client.table(self.table_name)
            .update(data)
            .eq(self.id_field, record_id)
            .select()
            .execute()
        )
        return self._to_service_result("Update", result)

    async def delete(self, record_id: str) -> ServiceResult:
        """
        Delete a record by primary key and return the deleted row

        Args:
            record_id: Primary key value of record to delete

        Returns:
            ServiceResult with deleted record data; empty data when no row matched
        """
        result = await (
            self.client.table(self.table_name)
            .delete()
            .eq(self.id_field, record_id)
            .select()
            .execute()
        )
        return self._to_service_result("Delete", result)
