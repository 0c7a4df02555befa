from typing import Any, Callable, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from promptdeck.agents import config as global_config
from promptdeck.agents.generation.config import PersistenceConfig, get_persistence_config
from promptdeck.agents.generation.exceptions import (
    MissingConfigError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    UnavailableError,
)
from promptdeck.setup_logging_optimized import get_logger
from promptdeck.utils.timestamps import to_iso, utc_now

logger = get_logger(__name__)

_service_client: Optional[Client] = None

# PostgREST / Postgres codes meaning the caller is not allowed to do this
PERMISSION_CODES = {"42501", "PGRST301", "PGRST302"}
# No row for .single()
NOT_FOUND_CODES = {"PGRST116"}

TRANSIENT_MARKERS = (
    "StreamReset", "UNEXPECTED_EOF_WHILE_READING", "EOF occurred in violation of protocol",
    "RemoteProtocolError", "ConnectionResetError", "ReadError",
)


def get_supabase_client(config: Optional[PersistenceConfig] = None) -> Client:
    """
    Create and return a Supabase client instance.
    This will use the service key if available to bypass RLS.

    Raises:
        MissingConfigError: If SUPABASE_URL or SUPABASE_KEY are not set
    """
    global _service_client

    config = config or get_persistence_config()
    if not config.supabase_url or not config.supabase_key:
        raise MissingConfigError("SUPABASE_URL and SUPABASE_KEY environment variables must be set")

    if _service_client is None:
        _service_client = create_client(config.supabase_url, config.supabase_key)

    return _service_client


def reset_supabase_client() -> None:
    """
    Reset the cached Supabase client so a fresh connection pool is created on next use.
    Helpful to recover from HTTP/2 stream resets and SSL EOFs.
    """
    global _service_client
    _service_client = None
    logger.info("Supabase client has been reset")


def translate_supabase_error(error: Exception, description: str) -> PersistenceError:
    """Map SDK/transport exceptions onto the persistence error hierarchy."""
    context = {'operation': description}

    if isinstance(error, PersistenceError):
        return error

    if isinstance(error, APIError):
        code = str(error.code or "")
        context['code'] = code
        if code in PERMISSION_CODES:
            return PermissionDeniedError(f"Supabase {description} denied", cause=error, context=context)
        if code in NOT_FOUND_CODES:
            return NotFoundError(f"Supabase {description}: no such record", cause=error, context=context)
        if code.startswith("5") or code.startswith("PGRST0"):
            return UnavailableError(f"Supabase {description} unavailable", cause=error, context=context)
        return PersistenceError(f"Supabase {description} failed: {error.message}", cause=error, context=context)

    if isinstance(error, (httpx.HTTPError, ConnectionError, OSError)):
        if any(marker in str(error) for marker in TRANSIENT_MARKERS):
            reset_supabase_client()
        return UnavailableError(f"Supabase {description} unreachable", cause=error, context=context)

    return PersistenceError(f"Supabase {description} failed: {error}", cause=error, context=context)


class SupabaseProjectStore:
    """
    Blocking adapter over the ``projects`` and ``users`` tables.

    Methods are synchronous like the SDK itself; callers run them in an
    executor under a deadline.
    """

    def __init__(self, client_factory: Callable[[], Client] = get_supabase_client):
        self._client_factory = client_factory

    @property
    def client(self) -> Client:
        return self._client_factory()

    def _execute(self, operation: Callable[[], Any], description: str) -> Any:
        try:
            return operation()
        except Exception as e:
            logger.warning(f"Supabase {description} failed: {e}")
            raise translate_supabase_error(e, description)

    # --- projects ---

    def insert_project(self, record: Dict[str, Any]) -> Dict[str, Any]:
        response = self._execute(
            lambda: self.client.table(global_config.PROJECTS_TABLE).insert(record).execute(),
            f"insert project {record.get('id')}",
        )
        if not response.data:
            raise PersistenceError(f"Failed to insert project {record.get('id')}")
        return response.data[0]

    def get_project(self, project_id: str) -> Dict[str, Any]:
        response = self._execute(
            lambda: self.client.table(global_config.PROJECTS_TABLE).select("*").eq("id", project_id).execute(),
            f"get project {project_id}",
        )
        if not response.data:
            raise NotFoundError(f"Project {project_id} not found", context={'project_id': project_id})
        return response.data[0]

    def update_project(self, project_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        # updatedAt is stamped at write time regardless of the caller's patch
        payload = {**patch, 'updatedAt': to_iso(utc_now())}
        response = self._execute(
            lambda: self.client.table(global_config.PROJECTS_TABLE).update(payload).eq("id", project_id).execute(),
            f"update project {project_id}",
        )
        if not response.data:
            raise NotFoundError(f"Project {project_id} not found", context={'project_id': project_id})
        return response.data[0]

    def delete_project(self, project_id: str) -> None:
        response = self._execute(
            lambda: self.client.table(global_config.PROJECTS_TABLE).delete().eq("id", project_id).execute(),
            f"delete project {project_id}",
        )
        if not response.data:
            raise NotFoundError(f"Project {project_id} not found", context={'project_id': project_id})

    def list_projects(self, user_id: str, project_type: Optional[str] = None) -> List[Dict[str, Any]]:
        def query():
            builder = self.client.table(global_config.PROJECTS_TABLE).select("*").eq("userId", user_id)
            if project_type:
                builder = builder.eq("type", project_type)
            return builder.order("updatedAt", desc=True).execute()

        response = self._execute(query, f"list projects for {user_id}")
        return response.data or []

    # --- users ---

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        response = self._execute(
            lambda: self.client.table(global_config.USERS_TABLE).select("*").eq("id", user_id).execute(),
            f"get user {user_id}",
        )
        return response.data[0] if response.data else None

    def upsert_user(self, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        record = {**fields, 'id': user_id}
        response = self._execute(
            lambda: self.client.table(global_config.USERS_TABLE).upsert(record, on_conflict="id").execute(),
            f"upsert user {user_id}",
        )
        return response.data[0] if response.data else record

    def adjust_project_count(self, user_id: str, delta: int) -> int:
        """Read-modify-write of the owner's counter; never goes below zero."""
        user = self.get_user(user_id) or {}
        count = max(int(user.get('projectCount') or 0) + delta, 0)
        self._execute(
            lambda: self.client.table(global_config.USERS_TABLE).upsert(
                {'id': user_id, 'projectCount': count}, on_conflict="id"
            ).execute(),
            f"adjust project count for {user_id}",
        )
        return count
