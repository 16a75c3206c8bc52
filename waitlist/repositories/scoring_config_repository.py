"""
Scoring Config Repository - Teed Waitlist
waitlist/repositories/scoring_config_repository.py

Persists the active ScoringConfig (SCORING_CONFIG, ID = 1) and an
append-only change log (SCORING_CONFIG_HISTORY).
"""

import uuid
from typing import Optional

from waitlist.repositories.base import BaseRepository
from waitlist.scoring.weights import ScoringConfig


class ScoringConfigRepository(BaseRepository):
    """Repository for the scoring configuration row and its history."""

    TABLE_NAME = "SCORING_CONFIG"
    ROW_ID = 1

    def get_current(self) -> Optional[ScoringConfig]:
        """Stored config, or None when defaults are in force."""
        sql = "SELECT CONFIG FROM SCORING_CONFIG WHERE ID = %s"
        row = self.execute_query(sql, (self.ROW_ID,), fetch_one=True)
        if not row or row.get("CONFIG") is None:
            return None
        return ScoringConfig.model_validate(self.parse_variant(row["CONFIG"]))

    def save(self, config: ScoringConfig, reason: Optional[str] = None) -> ScoringConfig:
        """Upsert the active config and append a history row."""
        payload = self.to_variant(config.model_dump(mode="json"))
        sql = """
            MERGE INTO SCORING_CONFIG t
            USING (SELECT %s AS ID) s
            ON t.ID = s.ID
            WHEN NOT MATCHED THEN INSERT (ID, CONFIG, UPDATED_BY, UPDATED_AT)
                VALUES (%s, PARSE_JSON(%s), %s, CURRENT_TIMESTAMP())
            WHEN MATCHED THEN UPDATE SET
                CONFIG = PARSE_JSON(%s),
                UPDATED_BY = %s,
                UPDATED_AT = CURRENT_TIMESTAMP()
        """
        self.execute_query(
            sql,
            (
                self.ROW_ID,
                self.ROW_ID, payload, config.updated_by,
                payload, config.updated_by,
            ),
            commit=True,
        )
        self._log_change(config, payload, reason)
        return config

    def clear(self, updated_by: Optional[str] = None) -> None:
        """Drop the stored config so defaults apply again."""
        self.execute_query(
            "DELETE FROM SCORING_CONFIG WHERE ID = %s",
            (self.ROW_ID,),
            commit=True,
        )
        sql = """
            INSERT INTO SCORING_CONFIG_HISTORY (
                ID, CONFIG_VERSION, CONFIG, AUTO_APPROVE_THRESHOLD,
                UPDATED_BY, CHANGE_REASON, CREATED_AT
            )
            SELECT %s, NULL, NULL, NULL, %s, %s, CURRENT_TIMESTAMP()
        """
        self.execute_query(
            sql,
            (str(uuid.uuid4()), updated_by, "reset to defaults"),
            commit=True,
        )

    def _log_change(self, config: ScoringConfig, payload: str, reason: Optional[str]) -> None:
        # PARSE_JSON is not allowed in a VALUES clause, hence INSERT ... SELECT
        sql = """
            INSERT INTO SCORING_CONFIG_HISTORY (
                ID, CONFIG_VERSION, CONFIG, AUTO_APPROVE_THRESHOLD,
                UPDATED_BY, CHANGE_REASON, CREATED_AT
            )
            SELECT %s, %s, PARSE_JSON(%s), %s, %s, %s, CURRENT_TIMESTAMP()
        """
        self.execute_query(
            sql,
            (
                str(uuid.uuid4()),
                config.version,
                payload,
                config.auto_approve_threshold,
                config.updated_by,
                reason,
            ),
            commit=True,
        )
