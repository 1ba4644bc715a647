# Largest value an INTEGER column holds on PostgreSQL.
MAX_DB_INT = 2**31 - 1
