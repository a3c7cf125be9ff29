"""Ring buffer test suite.

This package contains tests for the ring buffer component:
- L1: Ring Buffer Internal Unit Tests
- L2: Backing Region Tests (plain and memory-mapped)
- L3: Stream Property Tests
- L4: Failure & Error Recovery Tests
"""
