"""ORM Models — persistence shapes for the SQL-backed entity store."""
