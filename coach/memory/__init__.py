"""
Coach Memory Module

Per-user state kept in process memory.

Components:
- conversation.py: bounded turn history, assistant turns tagged with analysis/action
- reinforcement.py: "this helped" records used to prefer proven interventions
- user_store.py: keyed user state with LRU/TTL eviction and per-user locks
"""
