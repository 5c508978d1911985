"""Repository layer for database operations.

Repositories encapsulate all database queries, keeping the services focused
on the generation pipeline. They never commit; callers own the transaction.
"""

from certengine.repositories.student_repository import StudentRepository
from certengine.repositories.utils import log_slow_query

__all__ = [
    "StudentRepository",
    "log_slow_query",
]
