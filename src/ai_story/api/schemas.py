from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ai_story.pipeline.request import StoryRequest


class GenerateStoryRequest(BaseModel):
    """Interview answers posted by the profile editor.

    Every field is optional; missing answers are rendered with fallback
    phrases rather than rejected.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    profile_id: str = Field(default="", alias="profileId")
    name: str | None = None
    location: str | None = None
    story_answers: str | None = Field(default=None, alias="storyAnswers")
    joy_humanity_answers: str | None = Field(default=None, alias="joyHumanityAnswers")
    passion_dreams_answers: str | None = Field(default=None, alias="passionDreamsAnswers")
    connection_preferences_answers: str | None = Field(default=None, alias="connectionPreferencesAnswers")
    open_ended_answer: str | None = Field(default=None, alias="openEndedAnswer")
    interest_tags: list[str] | None = Field(default=None, alias="interestTags")

    def to_story_request(self) -> StoryRequest:
        return StoryRequest(
            profile_id=self.profile_id,
            name=self.name,
            location=self.location,
            story_answers=self.story_answers,
            joy_humanity_answers=self.joy_humanity_answers,
            passion_dreams_answers=self.passion_dreams_answers,
            connection_preferences_answers=self.connection_preferences_answers,
            open_ended_answer=self.open_ended_answer,
            interest_tags=tuple(self.interest_tags or ()),
        )


class GenerateStoryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: Literal[True] = True
    story: str
    profile: dict[str, Any]
    token_limit: int = Field(alias="tokenLimit")
    content_sections: int = Field(alias="contentSections")


class GenerateStoryError(BaseModel):
    success: Literal[False] = False
    error: str
    provider: str
