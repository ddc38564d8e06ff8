# ABOUTME: AI integration module for LLM completions.
# ABOUTME: Provides the completion service and the article translator.

from translated_newsletter.ai.service import AIService
from translated_newsletter.ai.translator import Translator

__all__ = ["AIService", "Translator"]
