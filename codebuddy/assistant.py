"""Multi-provider AI helper - supports Gemini and OpenAI."""
import logging
from dataclasses import dataclass, field
from typing import Literal, Optional

from .config import get_gemini_model, get_openai_model
from .prompts import (
    ANALYZE_CONTEXT,
    ANALYZE_PROMPT,
    CHAT_LANGUAGE_PREFIX,
    CONNECTION_TEST_PROMPT,
    SYSTEM_PROMPT,
)
from .utils import extract_all_code_blocks, truncate

logger = logging.getLogger(__name__)


@dataclass
class AssistantReply:
    """Free-text answer from the AI service."""
    text: str
    model: str
    provider: str
    code_blocks: list[tuple[str, str]] = field(default_factory=list)


class CodeAssistant:
    """Explains code and answers coding questions for young coders."""

    ANALYZE_MAX_TOKENS = 1000
    CHAT_MAX_TOKENS = 800
    TEST_MAX_TOKENS = 100
    TEMPERATURE = 0.7

    def __init__(
        self,
        api_key: str,
        model: str = None,
        provider: Literal["openai", "gemini"] = "gemini",
        client=None
    ):
        """
        Initialize the assistant.

        Args:
            api_key: API key for the provider
            model: Model to use (defaults from .env: GEMINI_MODEL or OPENAI_MODEL)
            provider: Which AI provider to use ("gemini" or "openai")
            client: Pre-built SDK client (skips creating one)
        """
        self.provider = provider
        self.api_key = api_key

        if provider == "openai":
            if client is None:
                from openai import OpenAI
                client = OpenAI(api_key=api_key)
            self.model = model if model else get_openai_model()
        elif provider == "gemini":
            if client is None:
                from google import genai
                client = genai.Client(api_key=api_key)
            self.model = model if model else get_gemini_model()
        else:
            raise ValueError(f"Unknown provider: {provider}")

        self.client = client

    # =========================================================================
    # Public API
    # =========================================================================

    def test_connection(self) -> AssistantReply:
        """Send a tiny prompt to check the provider answers."""
        text = self._generate(CONNECTION_TEST_PROMPT, self.TEST_MAX_TOKENS)
        logger.info("%s connection test OK: %s", self.provider, truncate(text))
        return self._reply(text)

    def analyze(self, code: str, language: str, context: str = "") -> AssistantReply:
        """
        Explain code in kid-friendly terms.

        Args:
            code: The source code to analyze
            language: Programming language of the code
            context: Optional extra information, e.g. an error message

        Returns:
            AssistantReply with the analysis and any code blocks it contains
        """
        if not code or not language:
            raise ValueError("Code and language are required")

        prompt = ANALYZE_PROMPT.format(
            language=language,
            code=code,
            context=ANALYZE_CONTEXT.format(context=context) if context else "",
        )
        logger.info("Analyzing %s code with %s (context: %s)", language, self.model, truncate(context))
        text = self._generate(prompt, self.ANALYZE_MAX_TOKENS)
        return self._reply(text)

    def chat(self, message: str, language: Optional[str] = None, history: Optional[list[dict]] = None) -> AssistantReply:
        """
        Answer a coding question, continuing an earlier conversation.

        Args:
            message: The user's question
            language: Language the user is currently coding in
            history: Earlier turns as {"role": "user"|"assistant", "content": str}
        """
        if not message:
            raise ValueError("Message is required")

        formatted = CHAT_LANGUAGE_PREFIX.format(language=language, message=message) if language else message
        history = [turn for turn in (history or []) if isinstance(turn, dict) and turn.get("content")]
        logger.info("Chat message: %s%s", truncate(message), " (with history)" if history else "")

        if self.provider == "openai":
            text = self._chat_openai(formatted, history)
        else:
            text = self._chat_gemini(formatted, history)
        return self._reply(text)

    # =========================================================================
    # Provider calls
    # =========================================================================

    def _reply(self, text: str) -> AssistantReply:
        return AssistantReply(
            text=text,
            model=self.model,
            provider=self.provider,
            code_blocks=extract_all_code_blocks(text),
        )

    def _generate(self, prompt: str, max_tokens: int) -> str:
        if self.provider == "openai":
            return self._chat_openai(prompt, [], max_tokens)
        return self._generate_gemini(prompt, max_tokens)

    def _chat_openai(self, message: str, history: list[dict], max_tokens: int = None) -> str:
        """Call OpenAI API."""
        messages = [{"role": "system", "content": SYSTEM_PROMPT}]
        for turn in history:
            role = "user" if turn.get("role") == "user" else "assistant"
            messages.append({"role": role, "content": turn["content"]})
        messages.append({"role": "user", "content": message})

        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.TEMPERATURE,
            max_tokens=max_tokens or self.CHAT_MAX_TOKENS,
        )
        return response.choices[0].message.content or ""

    def _gemini_config(self, max_tokens: int):
        from google import genai

        return genai.types.GenerateContentConfig(
            temperature=self.TEMPERATURE,
            max_output_tokens=max_tokens,
            system_instruction=SYSTEM_PROMPT,
        )

    def _generate_gemini(self, prompt: str, max_tokens: int) -> str:
        """Call Gemini API using google-genai package."""
        response = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=self._gemini_config(max_tokens),
        )
        return response.text or ""

    def _chat_gemini(self, message: str, history: list[dict]) -> str:
        if not history:
            return self._generate_gemini(message, self.CHAT_MAX_TOKENS)

        from google import genai

        contents = [
            genai.types.Content(
                role="user" if turn.get("role") == "user" else "model",
                parts=[genai.types.Part(text=turn["content"])],
            )
            for turn in history
        ]
        chat = self.client.chats.create(
            model=self.model,
            config=self._gemini_config(self.CHAT_MAX_TOKENS),
            history=contents,
        )
        response = chat.send_message(message)
        return response.text or ""
