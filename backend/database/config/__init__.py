"""
The `config` package provides the two building blocks used to establish the database connection pool.

Contents:
    - config: Configuration layer - strongly typed app settings loaded from environment variables (with .env support), exposed through a singleton Settings object
    - connection_engine: Database layer - validates the required credentials, builds the SQLAlchemy connection URL and creates the bounded Engine (connection pool)

Together they provide environment-driven configuration and a single, owned pool handle.
"""
