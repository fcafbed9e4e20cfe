"""
Chat interface API - SmartMeal assistant backed by Claude
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import List
import logging

from backend.models.user import User
from backend.api.auth import get_current_user
from backend.services.claude_service import claude_service

router = APIRouter()
logger = logging.getLogger(__name__)

SMARTMEAL_PROMPT = """You are SmartMeal AI, the official assistant of the SmartMeal project.
SmartMeal connects restaurants with NGOs to reduce food waste and help communities.

Your tasks:
1. If asked to "upload today's serving", explain that today's servings are at
   /data/todaysserving.json and are listed for NGOs through /api/food.
2. Provide quick summaries of today's serving, food waste, and earnings.
3. Help with NGO-related tasks and SmartMeal system features.

If unrelated questions are asked, politely respond with:
"I'm SmartMeal AI and can only assist with SmartMeal-related tasks."
Always confirm before performing any action that modifies or uploads data.
Be friendly, professional, and focus only on SmartMeal-related automation."""


class ChatTurn(BaseModel):
    role: str
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatTurn]


class ChatResponse(BaseModel):
    reply: str


@router.post("/chat", response_model=ChatResponse)
async def chat(
    data: ChatRequest,
    current_user: User = Depends(get_current_user)
):
    """Send the conversation so far to the assistant"""
    try:
        reply = await claude_service.chat(
            messages=[m.model_dump() for m in data.messages],
            system_prompt=SMARTMEAL_PROMPT,
        )
    except Exception as e:
        logger.error(f"Chat completion failed: {e}")
        raise HTTPException(status_code=500, detail=f"AI service error: {str(e)}")

    return ChatResponse(reply=reply or "No response")
