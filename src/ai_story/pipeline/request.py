from dataclasses import dataclass, field


@dataclass(frozen=True)
class StoryRequest:
    """One profile's interview answers, exactly as the caller sent them.

    Answer fields stay raw (``None`` when the caller omitted them) because the
    persisted profile echoes them back verbatim. Presence and fallback rules
    live in ``pipeline.richness`` and ``pipeline.prompt``.
    """

    profile_id: str
    name: str | None = None
    location: str | None = None
    story_answers: str | None = None
    joy_humanity_answers: str | None = None
    passion_dreams_answers: str | None = None
    connection_preferences_answers: str | None = None
    open_ended_answer: str | None = None
    interest_tags: tuple[str, ...] = field(default_factory=tuple)

    @property
    def content_sections(self) -> tuple[str | None, ...]:
        return (
            self.story_answers,
            self.joy_humanity_answers,
            self.passion_dreams_answers,
            self.connection_preferences_answers,
            self.open_ended_answer,
        )
