"""SQL statements shared by both backends.

Statements use PostgreSQL ``$N`` placeholders; the SQLite backend rewrites
them before execution.
"""

LATEST_PERSONS_LIMIT = 10

latest_persons_sql = f"""
    SELECT id, name, phone, company
    FROM persons
    ORDER BY id DESC
    LIMIT {LATEST_PERSONS_LIMIT}
"""

insert_person_sql = "INSERT INTO persons (name, phone, company) VALUES ($1, $2, $3)"
