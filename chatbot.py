"""
Voyager travel chatbot on top of the OpenAI chat completions API.
"""
import logging
import os
from typing import List, Literal, Optional

from openai import OpenAI, OpenAIError
from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo"

UNAVAILABLE_REPLY = (
    "I apologize, but I'm not available right now due to a configuration issue. "
    "Please try again later."
)
FAILURE_REPLY = (
    "I apologize, but I'm having trouble connecting to my knowledge base right now. "
    "Please try again in a moment."
)
EMPTY_REPLY = "I'm sorry, I couldn't generate a response. Please try again."

TRAVELER_PERSONALITY = """You are Voyager, an enthusiastic and knowledgeable AI travel companion with a warm, friendly personality.

You have the following traits:
- Passionate about travel and exploring new cultures
- Knowledgeable about global destinations, customs, and travel tips
- Considerate of travelers' budgets and preferences
- Encouraging of sustainable tourism and respectful travel practices
- Excited to help travelers discover hidden gems and authentic experiences
- Practical with advice about logistics, safety, and planning

When someone asks about a destination:
- Share interesting facts about the location
- Mention key attractions, but highlight less touristy spots too
- Consider seasonal factors relevant to the time they're traveling
- Offer practical tips about transportation, accommodations, and local etiquette
- Suggest authentic food experiences

When suggesting travel plans:
- Be mindful of realistic travel times and jetlag
- Avoid cramming too many activities into one day
- Balance tourist highlights with authentic local experiences
- Recommend time for rest and spontaneous exploration"""


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class TravelDates(BaseModel):
    startDate: Optional[str] = None
    endDate: Optional[str] = None


class ChatRequest(BaseModel):
    messages: List[ChatMessage]
    city: Optional[str] = None
    interests: Optional[List[str]] = None
    travelDates: Optional[TravelDates] = None


def _context_prompt(request: ChatRequest) -> Optional[str]:
    lines = []
    if request.city:
        lines.append(f"- They're interested in traveling to {request.city}")
    if request.interests:
        lines.append(f"- Their travel interests include: {', '.join(request.interests)}")
    dates = request.travelDates
    if dates and dates.startDate and dates.endDate:
        lines.append(f"- They're planning to travel from {dates.startDate} to {dates.endDate}")
    elif dates and dates.startDate:
        lines.append(f"- They're planning to start their trip on {dates.startDate}")
    if not lines:
        return None
    return "Here's some additional context about the traveler's plans:\n" + "\n".join(lines)


def build_messages(request: ChatRequest) -> list[dict]:
    messages = [{"role": "system", "content": TRAVELER_PERSONALITY}]
    messages += [m.model_dump() for m in request.messages]
    context = _context_prompt(request)
    if context:
        messages.append({"role": "system", "content": context})
    return messages


def default_client() -> Optional[OpenAI]:
    api_key = os.getenv("OPENAI_API_KEY")
    return OpenAI(api_key=api_key) if api_key else None


def generate_chat_response(request: ChatRequest, client: Optional[OpenAI] = None) -> ChatMessage:
    """Answer the latest user message in the Voyager persona.

    Never raises: a missing key or an API failure becomes a polite
    assistant message so the chat window always gets a reply.
    """
    if client is None:
        return ChatMessage(role="assistant", content=UNAVAILABLE_REPLY)

    try:
        response = client.chat.completions.create(
            model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
            messages=build_messages(request),
            temperature=0.7,
            max_tokens=500,
        )
    except OpenAIError as exc:
        logger.warning("Chatbot completion failed: %s", exc)
        return ChatMessage(role="assistant", content=FAILURE_REPLY)

    content = response.choices[0].message.content
    return ChatMessage(role="assistant", content=(content or "").strip() or EMPTY_REPLY)
