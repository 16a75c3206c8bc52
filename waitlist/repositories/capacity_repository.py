"""
Capacity Repository - Teed Waitlist
waitlist/repositories/capacity_repository.py

Single-row seat counter for the beta (BETA_CAPACITY, ID = 1).

This is the only code that mutates APPROVED_COUNT. Every mutation is a
conditional UPDATE whose WHERE clause re-checks the invariant
APPROVED_COUNT <= BETA_CAP, so concurrent writers cannot overshoot the cap:
the loser of a race sees an affected row count of 0.
"""

from waitlist.config import settings
from waitlist.core.exceptions import InvalidCapacityException
from waitlist.models.capacity import CapacityState
from waitlist.repositories.base import BaseRepository


class CapacityRepository(BaseRepository):
    """Repository for the beta seat counter."""

    TABLE_NAME = "BETA_CAPACITY"
    ROW_ID = 1

    def get_state(self) -> CapacityState:
        """
        Read the current capacity snapshot, creating the row on first use.

        Returns:
            CapacityState with beta_cap and approved_count
        """
        sql = """
            SELECT BETA_CAP, APPROVED_COUNT
            FROM BETA_CAPACITY
            WHERE ID = %s
        """
        row = self.execute_query(sql, (self.ROW_ID,), fetch_one=True)
        if not row:
            self._ensure_row()
            row = self.execute_query(sql, (self.ROW_ID,), fetch_one=True)
        return CapacityState(
            beta_cap=int(row["BETA_CAP"]),
            approved_count=int(row["APPROVED_COUNT"]),
        )

    def claim_seat(self, expected_count: int) -> bool:
        """
        Compare-and-swap: take one seat if the count is still expected_count.

        Args:
            expected_count: APPROVED_COUNT observed when the decision was made

        Returns:
            True if the seat was claimed, False if another writer got there
            first or the cap has been reached.
        """
        sql = """
            UPDATE BETA_CAPACITY
            SET APPROVED_COUNT = APPROVED_COUNT + 1,
                UPDATED_AT = CURRENT_TIMESTAMP()
            WHERE ID = %s
              AND APPROVED_COUNT = %s
              AND APPROVED_COUNT < BETA_CAP
        """
        affected = self.execute_query(sql, (self.ROW_ID, expected_count), commit=True)
        return affected == 1

    def release_seat(self) -> bool:
        """Give a seat back, e.g. when persisting an approval failed."""
        sql = """
            UPDATE BETA_CAPACITY
            SET APPROVED_COUNT = APPROVED_COUNT - 1,
                UPDATED_AT = CURRENT_TIMESTAMP()
            WHERE ID = %s
              AND APPROVED_COUNT > 0
        """
        affected = self.execute_query(sql, (self.ROW_ID,), commit=True)
        return affected == 1

    def set_cap(self, beta_cap: int) -> CapacityState:
        """
        Move the cap, refusing to drop it below the seats already taken.

        Raises:
            InvalidCapacityException: if beta_cap < APPROVED_COUNT
        """
        self.get_state()
        sql = """
            UPDATE BETA_CAPACITY
            SET BETA_CAP = %s,
                UPDATED_AT = CURRENT_TIMESTAMP()
            WHERE ID = %s
              AND APPROVED_COUNT <= %s
        """
        affected = self.execute_query(sql, (beta_cap, self.ROW_ID, beta_cap), commit=True)
        state = self.get_state()
        if affected != 1:
            raise InvalidCapacityException(beta_cap, state.approved_count)
        return state

    def _ensure_row(self) -> None:
        sql = """
            MERGE INTO BETA_CAPACITY t
            USING (SELECT %s AS ID) s
            ON t.ID = s.ID
            WHEN NOT MATCHED THEN INSERT (ID, BETA_CAP, APPROVED_COUNT, UPDATED_AT)
            VALUES (%s, %s, 0, CURRENT_TIMESTAMP())
        """
        self.execute_query(
            sql,
            (self.ROW_ID, self.ROW_ID, settings.DEFAULT_BETA_CAP),
            commit=True,
        )
