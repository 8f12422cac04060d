"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the csv ledger.

The tests are organized by invariant:
1. conservation.py - total == available + held, one home per tx id
2. atomicity.py - Lines before a failure stay applied, nothing after
3. idempotency.py - Repeated disputes, resolves and chargebacks
4. determinism.py - Same stream, same statement
5. canonicalization.py - Exact fixed-point amounts and row decoding
6. temporal.py - Event ordering and account locking

These tests use hypothesis for property-based testing.
"""
