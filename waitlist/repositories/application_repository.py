"""
Application Repository - Teed Waitlist
waitlist/repositories/application_repository.py

Data access layer for waitlist applications.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence
from uuid import UUID

from waitlist.core.exceptions import DuplicateEntityException
from waitlist.models.application import WaitlistApplication
from waitlist.models.enumerations import ApplicationStatus
from waitlist.repositories.base import BaseRepository

_COLUMNS = """
    ID, EMAIL, DISPLAY_NAME, CITY_REGION, ANSWERS, SCORE, STATUS,
    HONEYPOT_TRIGGERED, CONFIG_VERSION, CREATED_AT, APPROVED_AT
"""


class ApplicationRepository(BaseRepository):
    """Repository for WAITLIST_APPLICATIONS."""

    TABLE_NAME = "WAITLIST_APPLICATIONS"

    def get_by_email(self, email: str) -> Optional[WaitlistApplication]:
        """
        Retrieve an application by (normalised) email.

        Args:
            email: Lower-cased email address

        Returns:
            WaitlistApplication or None if not found
        """
        sql = f"SELECT {_COLUMNS} FROM WAITLIST_APPLICATIONS WHERE EMAIL = %s"
        row = self.execute_query(sql, (email,), fetch_one=True)
        return self._row_to_application(row) if row else None

    def get_by_ids(self, application_ids: Sequence[UUID]) -> List[WaitlistApplication]:
        """Applications whose ID is in application_ids; unknown IDs are skipped."""
        if not application_ids:
            return []
        placeholders = ", ".join(["%s"] * len(application_ids))
        sql = f"SELECT {_COLUMNS} FROM WAITLIST_APPLICATIONS WHERE ID IN ({placeholders})"
        params = tuple(str(i) for i in application_ids)
        rows = self.execute_query(sql, params, fetch_all=True) or []
        return [self._row_to_application(r) for r in rows]

    def list_by_status(self, status: ApplicationStatus, limit: int = 100) -> List[WaitlistApplication]:
        sql = f"""
            SELECT {_COLUMNS}
            FROM WAITLIST_APPLICATIONS
            WHERE STATUS = %s
            ORDER BY CREATED_AT
            LIMIT %s
        """
        rows = self.execute_query(sql, (status.value, limit), fetch_all=True) or []
        return [self._row_to_application(r) for r in rows]

    def list_status_scores(self) -> List[Dict[str, Any]]:
        """(status, score) for every application; feeds the beta summary."""
        sql = "SELECT STATUS, SCORE FROM WAITLIST_APPLICATIONS"
        rows = self.execute_query(sql, fetch_all=True) or []
        return [{"status": r["STATUS"], "score": int(r["SCORE"])} for r in rows]

    def count_approvals_since(self, windows: Mapping[str, datetime]) -> Dict[str, int]:
        """
        Approved applications per window, counted on APPROVED_AT.

        Args:
            windows: window name -> inclusive lower bound. Names are internal
                     constants and become column aliases.

        Returns:
            window name -> count (0 for an empty table)
        """
        if not windows:
            return {}
        names = list(windows)
        counts = ",\n                ".join(
            f"COUNT_IF(APPROVED_AT >= %s) AS {name.upper()}" for name in names
        )
        sql = f"""
            SELECT
                {counts}
            FROM WAITLIST_APPLICATIONS
            WHERE STATUS = %s AND APPROVED_AT IS NOT NULL
        """
        params = tuple(windows[name] for name in names) + (ApplicationStatus.APPROVED.value,)
        row = self.execute_query(sql, params, fetch_one=True) or {}
        return {name: int(row.get(name.upper()) or 0) for name in names}

    def create(self, application: WaitlistApplication) -> WaitlistApplication:
        """
        Insert a new application.

        Snowflake does not enforce UNIQUE, so the insert is a MERGE keyed on
        EMAIL and an affected count of 0 means the email was already present.

        Raises:
            DuplicateEntityException: if an application exists for the email
        """
        sql = """
            MERGE INTO WAITLIST_APPLICATIONS t
            USING (SELECT %s AS EMAIL) s
            ON t.EMAIL = s.EMAIL
            WHEN NOT MATCHED THEN INSERT (
                ID, EMAIL, DISPLAY_NAME, CITY_REGION, ANSWERS, SCORE, STATUS,
                HONEYPOT_TRIGGERED, CONFIG_VERSION, CREATED_AT, APPROVED_AT, UPDATED_AT
            ) VALUES (
                %s, %s, %s, %s, PARSE_JSON(%s), %s, %s,
                %s, %s, %s, %s, CURRENT_TIMESTAMP()
            )
        """
        params = (
            application.email,
            str(application.id),
            application.email,
            application.display_name,
            application.city_region,
            self.to_variant(application.answers),
            application.score,
            application.status.value,
            application.honeypot_triggered,
            application.config_version,
            application.created_at,
            application.approved_at,
        )
        inserted = self.execute_query(sql, params, commit=True)
        if inserted != 1:
            raise DuplicateEntityException(f"Application already exists for {application.email}")
        return application

    def mark_approved(self, application_id: UUID, approved_at: Optional[datetime] = None) -> bool:
        """
        Move an application to approved unless it already is.

        Returns:
            True if this call performed the transition
        """
        approved_at = approved_at or datetime.now(timezone.utc)
        sql = """
            UPDATE WAITLIST_APPLICATIONS
            SET STATUS = %s,
                APPROVED_AT = %s,
                UPDATED_AT = CURRENT_TIMESTAMP()
            WHERE ID = %s
              AND STATUS <> %s
        """
        affected = self.execute_query(
            sql,
            (
                ApplicationStatus.APPROVED.value,
                approved_at,
                str(application_id),
                ApplicationStatus.APPROVED.value,
            ),
            commit=True,
        )
        return affected == 1

    def _row_to_application(self, row: Dict[str, Any]) -> WaitlistApplication:
        """Convert Snowflake row to WaitlistApplication."""
        return WaitlistApplication(
            id=UUID(str(row["ID"])),
            email=row["EMAIL"],
            display_name=row["DISPLAY_NAME"],
            city_region=row.get("CITY_REGION"),
            answers=self.parse_variant(row.get("ANSWERS")),
            score=int(row["SCORE"]),
            status=ApplicationStatus(row["STATUS"]),
            honeypot_triggered=bool(row.get("HONEYPOT_TRIGGERED")),
            config_version=row.get("CONFIG_VERSION"),
            created_at=self.normalize_timestamp(row.get("CREATED_AT")),
            approved_at=self.normalize_timestamp(row.get("APPROVED_AT")),
        )
