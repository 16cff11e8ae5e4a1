"""OpenAI Responses API client for text and vision calls."""

import json
from dataclasses import dataclass

from fitting_room.adapters.openai_provider import OpenAIClientProvider
from fitting_room.domain.media import MediaBlob
from fitting_room.services.dialogue import ChatClient
from fitting_room.services.links import LinkSearchClient
from fitting_room.services.profile import ProfileClient
from fitting_room.services.wardrobe import WardrobeClient


@dataclass
class OpenAITextClient(ProfileClient, WardrobeClient, LinkSearchClient, ChatClient):
    """Text, vision and chat calls backed by the OpenAI Responses API."""

    provider: OpenAIClientProvider

    async def extract(
        self,
        *,
        model: str,
        image: MediaBlob,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Call the Responses API with an image and structured outputs."""
        content = [
            {"type": "input_text", "text": prompt},
            {"type": "input_image", "image_url": image.to_data_url()},
        ]
        return await self._structured(model, content, schema, "profile_extract")

    async def generate_json(
        self, *, model: str, schema: dict[str, object], prompt: str
    ) -> dict[str, object]:
        """Call the Responses API with structured outputs."""
        content = [{"type": "input_text", "text": prompt}]
        return await self._structured(model, content, schema, "wardrobe_curation")

    async def search_and_answer(self, *, model: str, prompt: str) -> str:
        """Answer a prompt with the web search tool enabled."""
        response = await self.provider.get().responses.create(
            model=model,
            input=prompt,
            tools=[{"type": "web_search"}],
        )
        return response.output_text or ""

    async def reply(
        self,
        *,
        model: str,
        instructions: str,
        history: list[tuple[str, str]],
        message: str,
    ) -> str:
        """Continue a conversation with the given system instructions."""
        turns = [{"role": role, "content": text} for role, text in history]
        turns.append({"role": "user", "content": message})
        response = await self.provider.get().responses.create(
            model=model,
            instructions=instructions,
            input=turns,
        )
        return response.output_text or ""

    async def _structured(
        self,
        model: str,
        content: list[dict[str, str]],
        schema: dict[str, object],
        name: str,
    ) -> dict[str, object]:
        response = await self.provider.get().responses.create(
            model=model,
            input=[{"role": "user", "content": content}],
            text={
                "format": {
                    "type": "json_schema",
                    "name": name,
                    "strict": True,
                    "schema": schema,
                }
            },
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)
