from __future__ import annotations

import logging
from typing import Any, Sequence

from openai import APIStatusError, AsyncOpenAI, OpenAIError

from services.errors import UpstreamGenerationError
from services.funnel_profiles import FunnelProfile, FunnelType

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a professional content creator. Return only valid JSON."""

PROMPT_TEMPLATE = """
You are a professional content creator specializing in LinkedIn content for SME leaders and B2C companies under 200 employees.

CONTENT REQUIREMENTS:
- Funnel Type: {funnel_type}
- Word Count: {word_count} words
- LinkedIn Snippet: {linkedin_count} words
- Tone: {tone}
- Goal: {goal}
- Structure: {structure}

CONTENT DETAILS:
- Headline: {headline}
- Summary: {summary}
- Category: {category}
- Author: {author}
{subheading_section}
TARGET AUDIENCE: SME Leaders & Founders in Travel, Wellness/Fitness, Retail, Food & Beverages, Hospitality

FORMATTING REQUIREMENTS:
- Use ONLY Markdown formatting (NO HTML tags)
- NO emoticons or emojis anywhere in the content
- Use ## for main headings, ### for subheadings
- Use * or - for bullet points
- Use **bold** and *italic* for emphasis
- Add line breaks logically to ensure readability
- Use > for blockquotes if needed
- Clean, professional formatting only

INSTRUCTIONS:
1. Create a comprehensive blog article based on the headline and summary
2. Use the specified funnel type approach and structure
3. Include actionable insights and real-world examples
4. End with a clear call-to-action
5. Create a separate LinkedIn snippet that teases the full article
6. Write in Markdown format only - no HTML, no emoticons
7. Make the content substantial enough to be split into two parts

RESPONSE FORMAT:
Return your response as a JSON object with exactly these fields:
{{
  "articleBody": "Full article content in Markdown format (no HTML, no emoticons)",
  "linkedinSnippet": "LinkedIn post content with hook and CTA to read full article (no emoticons)"
}}

Your entire response must be valid JSON. Do not include any text outside the JSON structure.
""".strip()

SUBHEADING_TEMPLATE = """
SECTION HEADINGS:
Use these exact texts, in this order, as the ## headings of the article:
{headings}
"""


def build_prompt(
    profile: FunnelProfile,
    funnel_type: FunnelType,
    headline: str,
    summary: str,
    categories: Sequence[str],
    author: str,
    subheadings: Sequence[str] = (),
) -> str:
    subheading_section = ""
    if subheadings:
        subheading_section = SUBHEADING_TEMPLATE.format(
            headings="\n".join(f"{index}. {text}" for index, text in enumerate(subheadings, start=1))
        )
    return PROMPT_TEMPLATE.format(
        funnel_type=funnel_type.value,
        word_count=profile.word_count,
        linkedin_count=profile.linkedin_count,
        tone=profile.tone,
        goal=profile.goal,
        structure=profile.structure,
        headline=headline,
        summary=summary,
        category=", ".join(categories),
        author=author,
        subheading_section=subheading_section,
    )


class ContentGeneratorService:
    """Request article text from an OpenAI-compatible responses API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str | None = None,
        max_output_tokens: int = 4000,
        temperature: float = 0.7,
        client: Any | None = None,
    ) -> None:
        self._client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._model = model
        self._max_output_tokens = max_output_tokens
        self._temperature = temperature

    async def complete(self, prompt: str, max_output_tokens: int | None = None) -> str:
        """Return the raw text of the model reply; parsing is left to the caller."""
        try:
            response = await self._client.responses.create(
                model=self._model,
                input=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._temperature,
                max_output_tokens=max_output_tokens or self._max_output_tokens,
            )
        except APIStatusError as exc:
            logger.error(
                "LLM API error: status=%s body=%s",
                exc.status_code,
                str(exc.body)[:500] if exc.body is not None else None,
            )
            raise UpstreamGenerationError(
                f"LLM API failed: {exc.status_code}", upstream_status=exc.status_code
            ) from exc
        except OpenAIError as exc:
            logger.error("LLM API request failed: %s", exc)
            raise UpstreamGenerationError(f"LLM API failed: {exc}") from exc

        content = getattr(response, "output_text", None)
        if not content:
            raise UpstreamGenerationError("LLM API returned an empty response.")
        logger.debug("LLM returned %s characters", len(content))
        return content
