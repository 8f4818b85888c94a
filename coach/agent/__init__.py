"""
Coach Agent Module

Turns one message into a supportive response.

Components:
- models.py: EmotionalAnalysis, AgentAction and their enums
- action_classifier.py: four-way action decision (risk > trigger > time > general)
- insights.py: per-turn insights and standing recommendations
- system_prompt.py: persona prompt and conversation context for the reply model
- llm_client.py: Classifier/Generator interfaces, Anthropic and keyword implementations
- config_models.py: pydantic models for args/coach.yaml
- engine.py: CoachEngine, the full per-message pipeline
"""
