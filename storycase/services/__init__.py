from storycase.services.generation_service import GenerationService
from storycase.services.normalizer import parse_test_cases, strip_code_fences

__all__ = ["GenerationService", "parse_test_cases", "strip_code_fences"]
