"""
hogman - a PostHog API bridge for the terminal and for LLM agents.

Provides:
- Multi-account credential profiles with env/flag/default precedence
- A pagination-aware PostHog REST client with typed errors
- HogQL queries with table or JSON output
"""

__version__ = "0.1.0"
__app_name__ = "hogman"
