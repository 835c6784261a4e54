"""
Services for the GTD agent.

- prompts: Prompt templates built from domain records
- ai_service: AIService forwarding prompts to a hosted chat-completion backend
"""

from gtd.services.ai_service import AIService, AISettings, get_provider

__all__ = ["AIService", "AISettings", "get_provider"]
