"""LLM classification and Ollama server checks."""

from .checks import LLMStatus, check_connection, check_required_model, probe_llm, validate_url
from .ollama import OllamaClassifier, interpret_stream
from .prompts import build_sentiment_prompt
from .stream import StreamResult, read_stream, strip_reasoning

__all__ = [
    "OllamaClassifier",
    "interpret_stream",
    "build_sentiment_prompt",
    "StreamResult",
    "read_stream",
    "strip_reasoning",
    "LLMStatus",
    "validate_url",
    "check_connection",
    "check_required_model",
    "probe_llm",
]
