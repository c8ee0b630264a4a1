"""Performance benchmarks for lpconduit.

This package contains microbenchmarks for hot paths in the engine: the
two-phase solve and the dual-simplex re-optimization after a right-hand side
change.
"""
