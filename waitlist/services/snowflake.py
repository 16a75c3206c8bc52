"""
Snowflake connection factory used by the repositories.
"""

import snowflake.connector

from waitlist.config import settings


def get_snowflake_connection() -> snowflake.connector.SnowflakeConnection:
    """Open a new Snowflake connection from application settings."""
    params = dict(
        account=settings.SNOWFLAKE_ACCOUNT,
        user=settings.SNOWFLAKE_USER,
        password=settings.SNOWFLAKE_PASSWORD.get_secret_value(),
        warehouse=settings.SNOWFLAKE_WAREHOUSE,
        database=settings.SNOWFLAKE_DATABASE,
        schema=settings.SNOWFLAKE_SCHEMA,
    )
    if settings.SNOWFLAKE_ROLE:
        params["role"] = settings.SNOWFLAKE_ROLE
    return snowflake.connector.connect(**params)
