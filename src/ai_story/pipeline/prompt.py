import re
from typing import Mapping

from ai_story.pipeline.request import StoryRequest
from ai_story.pipeline.richness import NO_ANSWERS_PLACEHOLDER, NO_THOUGHTS_PLACEHOLDER, present_text

PLACEHOLDER_PATTERN = re.compile(r"\{\{([a-z_]+)\}\}")

FALLBACK_NAME = "This person"
FALLBACK_LOCATION = "their community"
FALLBACK_CONNECTION = "No specific preferences provided"
FALLBACK_INTERESTS = "No specific interests provided"

STORY_PROMPT_TEMPLATE = """You are a documentary street photographer in the tradition of Humans of New York. Write in that raw, intimate, deeply human style.

Write as if you are capturing a real conversation. Open with a powerful quote or moment taken from their answers. Let their own voice carry the piece and focus on ONE compelling story or revelation instead of summarising everything.

USE ONLY THE INFORMATION PROVIDED:
- Do not invent people, names, relationships or scenarios they did not mention
- Do not assume marital status, family relationships or specific people unless stated
- Do not create fictional details, conversations or events
- Do not embellish beyond what they actually shared
- If they say "girls", keep their general term; do not invent a named person
- Stick strictly to their own words, themes, feelings and experiences

BRIEF OR SINGLE-WORD ANSWERS:
- If someone answers "mom", that is ALL you know. Do not invent family dinners
- If someone says "eating", they enjoy eating. Do not invent meals or restaurants
- If someone says "people", they value people. Do not invent social situations
- Single-word answers are data points, not story prompts
- Do not expand brief answers into elaborate narratives or add context they did not give

Style:
- Start with their most powerful quote in quotation marks
- Write in the FIRST PERSON from their perspective
- Prefer specific moments over general descriptions
- Keep emotional vulnerability and raw honesty
- Use conversational language with natural pauses (...)
- Add context only when necessary, in parentheses or as brief transitions
- End with a reflection or a future-looking statement

Length:
- Rich content (many answers): 3-4 detailed paragraphs weaving their full story together
- Moderate content (some answers): 2-3 focused paragraphs on their main themes
- Minimal content (few answers): 2 short paragraphs that capture their essence

Incorporate everything they provided:
1. How they connect with others, to show their personality and social nature
2. Their final thoughts, often the most personal revelation, as a key insight or conclusion
3. Their core values, from the story & values answers
4. What makes them light up and feel most human
5. The dreams that drive them forward

### The person whose profile you will write:
Name: {{name}}
Location: {{location}}
Story & Values Answers: {{answers_story_values}}
Joy & Humanity Answers: {{answers_joy_humanity}}
Passion & Dreams Answers: {{answers_passion_dreams}}
How They Connect: {{connection_preferences}}
Their Final Thoughts: {{open_ended_answer}}
Interest Tags: {{interest_tags}}

Weave in HOW they connect with others and their final thoughts naturally. Use their exact phrases when they are powerful, including their pauses, their struggles to find words and their contradictions. This is a human being, not a character.

Build only from what they actually said:
- Brief answers mean a brief story
- Never fill gaps with fictional details; a shorter authentic story beats a longer invented one
- If they gave you "mom", "eating", "singing", work with just those concepts

Write their story now, using ONLY what they told you."""


def _or_fallback(value: str | None, fallback: str) -> str:
    return value or fallback


def placeholder_values(request: StoryRequest) -> dict[str, str]:
    tags = ", ".join(request.interest_tags)
    return {
        "name": _or_fallback(request.name, FALLBACK_NAME),
        "location": _or_fallback(request.location, FALLBACK_LOCATION),
        "answers_story_values": present_text(request.story_answers) or NO_ANSWERS_PLACEHOLDER,
        "answers_joy_humanity": present_text(request.joy_humanity_answers) or NO_ANSWERS_PLACEHOLDER,
        "answers_passion_dreams": present_text(request.passion_dreams_answers) or NO_ANSWERS_PLACEHOLDER,
        "connection_preferences": present_text(request.connection_preferences_answers) or FALLBACK_CONNECTION,
        "open_ended_answer": present_text(request.open_ended_answer) or NO_THOUGHTS_PLACEHOLDER,
        "interest_tags": tags or FALLBACK_INTERESTS,
    }


def render_template(template: str, values: Mapping[str, str]) -> str:
    """Substitute ``{{key}}`` tokens in one pass.

    Substituted text is never rescanned, so answers that happen to contain
    ``{{...}}`` stay verbatim. Unknown tokens are left untouched.
    """
    return PLACEHOLDER_PATTERN.sub(lambda match: values.get(match.group(1), match.group(0)), template)


class PromptComposer:
    def __init__(self, template: str = STORY_PROMPT_TEMPLATE) -> None:
        self.template = template

    def compose(self, request: StoryRequest) -> str:
        return render_template(self.template, placeholder_values(request))
