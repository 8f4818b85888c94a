"""
Coach Operations Module

Resilience helpers for calls to external services.
"""
