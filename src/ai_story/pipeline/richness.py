from dataclasses import dataclass
from typing import Iterable

from ai_story.pipeline.request import StoryRequest

NO_ANSWERS_PLACEHOLDER = "No specific answers provided"
NO_THOUGHTS_PLACEHOLDER = "No additional thoughts shared"
PLACEHOLDER_SENTINELS = frozenset({NO_ANSWERS_PLACEHOLDER, NO_THOUGHTS_PLACEHOLDER})


def is_section_present(text: str | None) -> bool:
    if text is None or not text.strip():
        return False
    return text not in PLACEHOLDER_SENTINELS


def present_text(text: str | None) -> str | None:
    """Return ``text`` when it counts as a real answer, else ``None``."""
    return text if is_section_present(text) else None


def count_present_sections(sections: Iterable[str | None]) -> int:
    return sum(1 for section in sections if is_section_present(section))


@dataclass(frozen=True)
class RichnessScore:
    content_sections: int
    token_limit: int

    def as_meta(self) -> dict:
        return {
            "contentSections": self.content_sections,
            "tokenLimit": self.token_limit,
        }


class TokenBudgetPlanner:
    """Maps input richness to a provider max-output-tokens hint.

    The budget only caps the response length; providers may return less.
    """

    def __init__(self, base_tokens: int = 400, tokens_per_section: int = 120, max_tokens: int = 1000) -> None:
        self.base_tokens = base_tokens
        self.tokens_per_section = tokens_per_section
        self.max_tokens = max_tokens

    def budget(self, section_count: int) -> int:
        return min(self.max_tokens, self.base_tokens + section_count * self.tokens_per_section)

    def score(self, request: StoryRequest) -> RichnessScore:
        sections = count_present_sections(request.content_sections)
        return RichnessScore(content_sections=sections, token_limit=self.budget(sections))
