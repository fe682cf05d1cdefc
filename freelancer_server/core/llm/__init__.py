"""LLM integration layer.

This package is intentionally small:
- No prompt/output logging (contains client profile data).
- Configurable via environment variables.
- Treated as a pure/stateless function by callers.
"""
