"""Query sources backed by concrete stores."""
