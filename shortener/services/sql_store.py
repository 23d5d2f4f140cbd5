"""
Shared plumbing for the SQL-backed stores.

Each write is executed and committed on its own. IntegrityError and
statements that touch no rows are rolled back and reported as
PersistenceError.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.exceptions import PersistenceError


class SQLStore:
    """Base class holding the session every SQL store works against."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _write(self, statement, failure: str, expected: Optional[int] = None) -> None:
        """
        Execute and commit one write statement.

        Args:
            statement: INSERT, UPDATE or DELETE to run
            failure: Message used if the write does not go through
            expected: Exact row count required, if any

        Raises:
            PersistenceError: If the statement violates a constraint or
                affects zero rows (or not exactly ``expected`` rows)
        """
        try:
            result = await self.session.execute(statement)
        except IntegrityError as e:
            await self.session.rollback()
            raise PersistenceError(failure, original_error=e)

        affected = result.rowcount
        if affected <= 0 or (expected is not None and affected != expected):
            await self.session.rollback()
            raise PersistenceError(f"{failure} ({affected} rows affected)")

        await self.session.commit()
