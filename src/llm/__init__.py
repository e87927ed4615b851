"""LLM integration module"""
from .ollama_client import OllamaClient
from .assistant import BusinessAssistant, AssistantAnswer
from .prompts import SYSTEM_PROMPT, build_context_prompt

__all__ = ['OllamaClient', 'BusinessAssistant', 'AssistantAnswer', 'SYSTEM_PROMPT', 'build_context_prompt']
