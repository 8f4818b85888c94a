"""
Interventions Module

Coping suggestions and how one is chosen for a turn.

Components:
- catalog.py: static suggestion buckets by emotion plus an emergency bucket
- selector.py: reinforcement first, then emergency, then emotion bucket
"""
