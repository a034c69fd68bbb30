# config/__init__.py
"""Environment-driven settings and the static Arbitrum address registry."""
