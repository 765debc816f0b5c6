"""SQL queries used by PostgreSQL schema introspection."""

COLUMNS_QUERY = """
SELECT table_name, column_name, data_type
FROM information_schema.columns
WHERE table_schema = %(schema)s
ORDER BY table_name, ordinal_position
"""

HEALTHCHECK_QUERY = """
SELECT
  current_database(),
  current_user,
  current_setting('server_version'),
  current_setting('transaction_read_only')
"""
