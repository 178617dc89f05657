"""
Process-wide plumbing for the tutorial API.

- `db`: asyncpg pool lifecycle and row helpers
- `settings`: environment lookups
- `logging_config`: root logger setup

Tutorial SQL and request handling live in `tutorials/`.
"""
