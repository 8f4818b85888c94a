"""
Emotional Eating Coach

Pattern analysis and intervention decisions for a self-reporting user working
through emotional eating.

Packages:
- learning/: mood log and pattern analysis (risk hours, dominant triggers)
- memory/: conversation history, "this helped" reinforcement, per-user store
- interventions/: coping-suggestion catalog and selection
- safety/: crisis keyword detection (always runs first)
- agent/: action classification, insights, LLM clients, the engine itself
- ops/: circuit breaker for external calls

Usage:
    from coach.agent.engine import CoachEngine

    engine = CoachEngine()
    result = await engine.submit_message("alice", "Work is crushing me, I want chips")
"""

from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent
ARGS_DIR = PROJECT_ROOT / "args"

__version__ = "0.1.0"

__all__ = ["ARGS_DIR", "PROJECT_ROOT", "__version__"]
