"""
core/__init__.py

Core orchestration modules.

This package contains the decision logic of the service:
- rules / rule_analyzer: Connector rule table and keyword-based intent analysis
- classifier: LLM-based connector classification
- intent_resolver: Union of both analyzers into one IntentResult
- connector_fetch: Concurrent per-connector summary collection
- topics / context_manager: Topic inference, excerpt retrieval and prompt rendering
- orchestrator: Per-query coordination and response assembly
"""
