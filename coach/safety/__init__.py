"""
Safety Module

Checks that run before anything else touches a message.

Components:
- crisis_detector.py: self-harm and severe-restriction keyword screening;
  a positive result replaces the coaching flow with crisis resources
"""
