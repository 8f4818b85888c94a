"""Emotional Eating Coach Test Suite

Test organization:
- unit/: Unit tests for individual modules
  - learning/: mood entries, mood log, pattern analysis
  - memory/: conversation memory, reinforcement, user store
  - interventions/: catalog and selection
  - safety/: crisis detection
  - agent/: action classifier, insights, LLM clients, config, engine
  - ops/: circuit breaker

Running tests:
    # All tests
    pytest

    # Specific module
    pytest tests/unit/learning/

    # Excluding slow tests
    pytest -m "not slow"
"""
