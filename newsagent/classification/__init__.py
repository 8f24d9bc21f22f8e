"""Relevance classification and deep analysis."""

from .analyzer import Analyzer, DeepAnalyzer, TemplateAnalyzer, failed_analysis
from .classifier import KeywordClassifier, LLMClassifier, RelevanceClassifier
from .json_extract import ParseResult, extract_json
from .llm_provider import LLMProvider, MockLLMProvider, OpenAIProvider

__all__ = [
    "Analyzer",
    "DeepAnalyzer",
    "TemplateAnalyzer",
    "failed_analysis",
    "KeywordClassifier",
    "LLMClassifier",
    "RelevanceClassifier",
    "ParseResult",
    "extract_json",
    "LLMProvider",
    "MockLLMProvider",
    "OpenAIProvider",
]
