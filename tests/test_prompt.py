from ai_story.pipeline.prompt import (
    FALLBACK_CONNECTION,
    FALLBACK_INTERESTS,
    FALLBACK_LOCATION,
    FALLBACK_NAME,
    STORY_PROMPT_TEMPLATE,
    PromptComposer,
    render_template,
)
from ai_story.pipeline.request import StoryRequest
from ai_story.pipeline.richness import NO_ANSWERS_PLACEHOLDER, NO_THOUGHTS_PLACEHOLDER


def _full_request(**overrides) -> StoryRequest:
    values = {
        "profile_id": "p1",
        "name": "Ana",
        "location": "Lisbon",
        "story_answers": "I left home at 17",
        "joy_humanity_answers": "my grandmother's garden",
        "passion_dreams_answers": "opening a bakery",
        "connection_preferences_answers": "one on one",
        "open_ended_answer": "I am still learning",
        "interest_tags": ("baking", "fado", "surfing"),
    }
    values.update(overrides)
    return StoryRequest(**values)


def _changed_lines(before: str, after: str) -> list[tuple[str, str]]:
    before_lines = before.splitlines()
    after_lines = after.splitlines()
    assert len(before_lines) == len(after_lines)
    return [(old, new) for old, new in zip(before_lines, after_lines) if old != new]


def test_compose_fills_every_field() -> None:
    prompt = PromptComposer().compose(_full_request())

    assert "Name: Ana\n" in prompt
    assert "Location: Lisbon\n" in prompt
    assert "Story & Values Answers: I left home at 17\n" in prompt
    assert "Joy & Humanity Answers: my grandmother's garden\n" in prompt
    assert "Passion & Dreams Answers: opening a bakery\n" in prompt
    assert "How They Connect: one on one\n" in prompt
    assert "Their Final Thoughts: I am still learning\n" in prompt
    assert "Interest Tags: baking, fado, surfing\n" in prompt
    assert "{{" not in prompt


def test_compose_uses_fallbacks_for_missing_fields() -> None:
    prompt = PromptComposer().compose(StoryRequest(profile_id="p1"))

    assert f"Name: {FALLBACK_NAME}\n" in prompt
    assert f"Location: {FALLBACK_LOCATION}\n" in prompt
    assert f"Story & Values Answers: {NO_ANSWERS_PLACEHOLDER}\n" in prompt
    assert f"Joy & Humanity Answers: {NO_ANSWERS_PLACEHOLDER}\n" in prompt
    assert f"Passion & Dreams Answers: {NO_ANSWERS_PLACEHOLDER}\n" in prompt
    assert f"How They Connect: {FALLBACK_CONNECTION}\n" in prompt
    assert f"Their Final Thoughts: {NO_THOUGHTS_PLACEHOLDER}\n" in prompt
    assert f"Interest Tags: {FALLBACK_INTERESTS}\n" in prompt


def test_empty_name_and_tags_fall_back_but_whitespace_is_kept() -> None:
    prompt = PromptComposer().compose(_full_request(name="", location="  ", interest_tags=()))
    assert f"Name: {FALLBACK_NAME}\n" in prompt
    assert "Location:   \n" in prompt
    assert f"Interest Tags: {FALLBACK_INTERESTS}\n" in prompt


def test_tags_keep_caller_order() -> None:
    prompt = PromptComposer().compose(_full_request(interest_tags=("zebra", "apple", "mango")))
    assert "Interest Tags: zebra, apple, mango\n" in prompt


def test_changing_one_field_only_changes_its_line() -> None:
    composer = PromptComposer()
    base = composer.compose(_full_request())
    changed = composer.compose(_full_request(location="Porto"))

    assert _changed_lines(base, changed) == [("Location: Lisbon", "Location: Porto")]


def test_answers_containing_placeholders_stay_verbatim() -> None:
    prompt = PromptComposer().compose(_full_request(story_answers="I wrote {{location}} on a wall"))

    assert "Story & Values Answers: I wrote {{location}} on a wall\n" in prompt
    assert "Location: Lisbon\n" in prompt


def test_template_prose_is_untouched() -> None:
    prompt = PromptComposer().compose(_full_request())
    head = STORY_PROMPT_TEMPLATE.split("{{name}}")[0]
    tail = STORY_PROMPT_TEMPLATE.split("{{interest_tags}}")[1]

    assert prompt.startswith(head)
    assert prompt.endswith(tail)


def test_render_template_leaves_unknown_tokens() -> None:
    assert render_template("{{a}} and {{b}}", {"a": "x"}) == "x and {{b}}"
