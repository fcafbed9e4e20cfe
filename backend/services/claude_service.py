"""
Claude API service wrapper for the SmartMeal assistant
"""
from anthropic import AsyncAnthropic
from backend.config import get_settings
from typing import Dict, List, Optional

settings = get_settings()


class ClaudeService:
    def __init__(self):
        api_key = settings.ANTHROPIC_API_KEY or None
        self.model = settings.CLAUDE_MODEL
        self.max_tokens = settings.CLAUDE_MAX_TOKENS
        self._available = bool(api_key)
        if self._available:
            self.client = AsyncAnthropic(api_key=api_key)
        else:
            self.client = None

    async def chat(
        self,
        messages: List[Dict[str, str]],
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Continue a conversation. Only user/assistant turns are forwarded;
        the system prompt is fixed by the caller.
        """
        if not self._available or self.client is None:
            raise RuntimeError("AI service not configured: ANTHROPIC_API_KEY is not set")

        turns = [
            {"role": m["role"], "content": m["content"]}
            for m in messages
            if m.get("role") in ("user", "assistant") and m.get("content")
        ]
        if not turns:
            return ""

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens or self.max_tokens,
            system=system_prompt if system_prompt else "",
            messages=turns
        )

        if not response.content:
            return ""
        return response.content[0].text


# Singleton instance
claude_service = ClaudeService()
