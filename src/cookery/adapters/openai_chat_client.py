"""OpenAI Chat Completions client for recipe text."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from cookery.services.recipes import TextGenerationClient


@dataclass
class OpenAIChatClient(TextGenerationClient):
    """Text generation client backed by OpenAI chat completions."""

    client: AsyncOpenAI

    async def chat_complete(
        self, *, model: str, messages: list[dict[str, str]]
    ) -> str | None:
        """Send the messages and return the first choice's content."""
        response = await self.client.chat.completions.create(
            model=model,
            messages=messages,
            response_format={"type": "json_object"},
        )
        if not response.choices:
            return None
        return response.choices[0].message.content
