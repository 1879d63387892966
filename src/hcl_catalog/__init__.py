"""Hardware compatibility list catalog: sheet aggregation, queries and API."""
