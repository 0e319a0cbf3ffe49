from courtside.semantic.base import SemanticAnalyzer, build_prompt, parse_semantic_response
from courtside.semantic.claude import ClaudeAnalyzer
from courtside.semantic.huggingface import HuggingFaceAnalyzer
from courtside.semantic.ollama import OllamaAnalyzer

__all__ = [
    "ClaudeAnalyzer",
    "HuggingFaceAnalyzer",
    "OllamaAnalyzer",
    "SemanticAnalyzer",
    "build_prompt",
    "parse_semantic_response",
]
