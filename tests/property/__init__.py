# tests/property/__init__.py
"""Property-based tests for pdasim.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of. For out-of-order admission the
central one is that arrival order never changes the outcome of a run.

Test categories:
- engine/: Arrival-order independence, reset and admission idempotence,
  stateful admission sequences
"""
