"""Services Layer — imperative shell: async DB orchestration around the pure core.

Invariants:
    - Services receive an AsyncSession; they commit, routes never do
    - Domain decisions are delegated to samu.core; services only load, apply and persist
"""
