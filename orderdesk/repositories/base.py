"""
Shared helpers for the repositories: the version-guarded write and
keyword pattern building.
"""
import logging
from typing import Any, Optional, Sequence

from orderdesk.core.exceptions import ConcurrencyConflictError

logger = logging.getLogger(__name__)


def execute_guarded(cursor, sql: str, params: Sequence[Any], entity: str, key: Any, version: int) -> int:
    """
    Run a version-conditioned UPDATE/DELETE and fail if it matched nothing

    The statement must carry `AND version = %s` in its WHERE clause (and,
    for updates, `version = version + 1`), so checking and bumping the token
    happen in one statement.

    Args:
        cursor: Cursor of the connection holding the open transaction
        sql: Guarded statement
        params: Statement parameters
        entity: Entity label used in the conflict error
        key: Primary key of the targeted row
        version: Version the caller read

    Returns:
        Affected row count

    Raises:
        ConcurrencyConflictError: If no row matched key and version
    """
    cursor.execute(sql, params)
    if cursor.rowcount == 0:
        logger.warning(f"Concurrency conflict on {entity} {key} (version {version})")
        raise ConcurrencyConflictError(entity, key, version)
    return cursor.rowcount


def normalize_keyword(keyword: Optional[str]) -> str:
    return (keyword or "").strip()


def like_pattern(keyword: str) -> str:
    """%keyword% for ILIKE, with LIKE wildcards in the keyword matched literally"""
    escaped = keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
