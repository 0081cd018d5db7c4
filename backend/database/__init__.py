"""
The `database` package is responsible for the application's connection to
its MySQL database. It does not define tables or queries; it owns the pool.

Contents:
    - config:
        Settings loaded from the environment and the Engine (connection pool)
        construction, including validation of the required DB_* variables.

    - helpers:
        The pool error observer and the one-shot startup probe that stops the
        process when the database cannot be reached.
"""
