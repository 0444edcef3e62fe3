"""
Health check API route
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from database.connection import DatabaseClient
from services.users_service import get_db_client

router = APIRouter()


@router.get("/health")
async def health_check(client: DatabaseClient = Depends(get_db_client)):
    """
    Health check - reports database connectivity

    Returns 200 when the database answers, 503 otherwise so load balancers
    can take the instance out of rotation.
    """
    database_ok = await client.ping()

    response = {
        "status": "healthy" if database_ok else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected" if database_ok else "unreachable",
    }

    return JSONResponse(status_code=200 if database_ok else 503, content=response)
