"""
The `helpers` package provides the runtime hooks that sit around the
connection pool once it has been created.

Contents
--------
- pool_events
    Pool error observer:
        - `register_pool_error_observer(engine)` attaches a `handle_error` listener
        - every pool/connection error is logged
        - ECONNRESET / ENOTFOUND / ECONNREFUSED additionally log a reconnect notice;
          the pool itself replaces broken connections

- startup_probe
    Fail-fast gate:
        - `probe_connection(engine)` checks out and releases one connection
        - `run_startup_gate(engine)` runs the probe once and exits the process
          with status 1 when the database is unreachable
"""
