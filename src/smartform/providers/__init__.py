from smartform.providers.generation import GenerationService, GenerationTask, resolve_lm_config

__all__ = ["GenerationService", "GenerationTask", "resolve_lm_config"]
