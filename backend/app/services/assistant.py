"""
Catalog assistant backed by an OpenAI-compatible chat completions API.
"""
import httpx
from typing import Any, Dict, List, Optional
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
from sqlalchemy.orm import Session
from app.core.config import settings
from app.models.movie import Movie
from app.models.channel import Channel
import logging

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I could not process your question right now."

PROMPT_TEMPLATE = """You are the virtual assistant of {project}, a streaming platform. Help users with information about movies, channels and how to use the platform.

PLATFORM CONTEXT:
- Available movies: {movies}
- Available channels: {channels}

INSTRUCTIONS:
- Answer in a friendly, helpful way
- For questions about specific movies, use the information above
- For questions about genres, recommend movies from the catalog
- For technical problems, give basic troubleshooting steps
- If you do not know something, say so and offer an alternative
- Keep answers short but informative

User question: {question}"""


def build_prompt(db: Session, question: str) -> str:
    """Embed the current catalog into the prompt sent to the model."""
    movies = db.query(Movie).order_by(Movie.title).all()
    channels = db.query(Channel).order_by(Channel.name).all()

    movie_lines = ", ".join(
        f'"{m.title}" ({m.year}) - {m.genre} - Rating: {m.ranking}/10' for m in movies
    ) or "none"
    channel_lines = ", ".join(c.name for c in channels) or "none"

    return PROMPT_TEMPLATE.format(
        project=settings.PROJECT_NAME,
        movies=movie_lines,
        channels=channel_lines,
        question=question.strip()
    )


class AssistantClient:
    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.api_url = api_url or settings.LLM_API_URL
        self.api_key = api_key if api_key is not None else settings.LLM_API_KEY
        self.model = model or settings.LLM_MODEL
        self.timeout = timeout or settings.LLM_TIMEOUT_SECONDS
        self.headers = {"Content-Type": "application/json"}
        if self.api_key:
            self.headers["Authorization"] = f"Bearer {self.api_key}"

    def _payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": settings.LLM_MAX_TOKENS,
            "temperature": settings.LLM_TEMPERATURE,
        }

    @staticmethod
    def _extract_reply(data: Dict[str, Any]) -> str:
        choices: List[Dict[str, Any]] = data.get("choices") or []
        if not choices:
            return FALLBACK_REPLY
        content = (choices[0].get("message") or {}).get("content")
        return content.strip() if content and content.strip() else FALLBACK_REPLY

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True
    )
    async def complete(self, prompt: str) -> str:
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            try:
                response = await client.post(self.api_url, headers=self.headers, json=self._payload(prompt))
                response.raise_for_status()
                return self._extract_reply(response.json())
            except httpx.HTTPStatusError as e:
                logger.error(f"Assistant HTTP error: {e.response.status_code} - {e}")
                raise
            except httpx.TransportError as e:
                logger.warning(f"Assistant connection error: {e}")
                raise


def get_assistant_client() -> AssistantClient:
    return AssistantClient()
