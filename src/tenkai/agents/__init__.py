"""Text-generation components."""

from tenkai.agents.generator import TextGenerator
from tenkai.agents.llm import create_chat_client
from tenkai.agents.prompts import load_prompt, render_prompt

__all__ = ["TextGenerator", "create_chat_client", "load_prompt", "render_prompt"]
