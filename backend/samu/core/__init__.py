"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (uuid generation in upload_rules aside)

Design Decisions:
    - Functional core separated from imperative shell: money math is unit-tested
      without a database
"""
