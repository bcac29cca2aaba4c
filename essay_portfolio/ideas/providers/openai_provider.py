# essay_portfolio/ideas/providers/openai_provider.py
"""OpenAI idea provider."""

import json
import os
from typing import Optional

from openai import OpenAI

from essay_portfolio.ideas.prompts import render_prompt
from essay_portfolio.ideas.providers.base import IdeaProvider
from essay_portfolio.ideas.types import GeneratedIdea


class OpenAIIdeaProvider(IdeaProvider):
    """OpenAI-based essay idea provider."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4.1-mini",
    ):
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.model = model
        self._client = OpenAI(api_key=self.api_key)

    @property
    def name(self) -> str:
        return "openai"

    def generate(
        self,
        prompt_text: str,
        activities: list[dict],
        honors: list[dict],
        intended_major: str = "Undecided",
        dream_college: str = "",
    ) -> list[GeneratedIdea]:
        """Generate ideas using OpenAI."""
        prompt = render_prompt(
            "generate_ideas",
            essay_prompt=prompt_text,
            intended_major=intended_major,
            dream_college=dream_college or "None given",
            activities=json.dumps(activities, default=str),
            honors=json.dumps(honors, default=str),
        )

        response = self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": "You are a college essay coach. Return only valid JSON."},
                {"role": "user", "content": prompt},
            ],
            temperature=0.8,
        )

        content = response.choices[0].message.content.strip()
        return self._parse_response(content)

    def _parse_response(self, content: str) -> list[GeneratedIdea]:
        """Parse JSON response into ideas."""
        # Try to extract JSON if wrapped in markdown code blocks
        if "```" in content:
            start = content.find("{")
            end = content.rfind("}") + 1
            if start != -1 and end > start:
                content = content[start:end]

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse idea response as JSON: {e}")

        ideas = data.get("ideas") if isinstance(data, dict) else None
        if not isinstance(ideas, list):
            raise ValueError("Idea response has no 'ideas' list")
        return [GeneratedIdea.from_dict(item) for item in ideas if isinstance(item, dict)]
