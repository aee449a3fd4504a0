import logging
from dataclasses import dataclass
from typing import Any, TypedDict

import httpx

from ai_story.config import Settings
from ai_story.pipeline.prompt import PromptComposer
from ai_story.pipeline.request import StoryRequest
from ai_story.pipeline.richness import RichnessScore, TokenBudgetPlanner
from ai_story.providers.llm.base import StoryProvider
from ai_story.providers.llm.factory import build_story_provider
from ai_story.storage.profiles import ProfileStore

logger = logging.getLogger(__name__)
PROMPT_LOG_LIMIT = 4000


@dataclass(frozen=True)
class GeneratedStory:
    text: str
    score: RichnessScore


@dataclass
class StoryResult:
    story: str
    profile: dict[str, Any]
    content_sections: int
    token_limit: int


class GenerationOrchestrator:
    """Scores the answers, builds the prompt and asks the configured provider.

    Exactly one provider is used per instance. Provider failures propagate
    unchanged; nothing is retried and there is no cross-provider fallback.
    """

    def __init__(
        self,
        provider: StoryProvider,
        budget_planner: TokenBudgetPlanner | None = None,
        composer: PromptComposer | None = None,
    ) -> None:
        self.provider = provider
        self.budget_planner = budget_planner or TokenBudgetPlanner()
        self.composer = composer or PromptComposer()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "GenerationOrchestrator":
        return cls(build_story_provider(settings, transport=transport))

    def score(self, request: StoryRequest) -> RichnessScore:
        score = self.budget_planner.score(request)
        logger.info("story.sections count=%d", score.content_sections)
        logger.info("story.budget max_tokens=%d", score.token_limit)
        return score

    def compose(self, request: StoryRequest) -> str:
        prompt = self.composer.compose(request)
        logger.debug("story.prompt chars=%d\n%s", len(prompt), prompt[:PROMPT_LOG_LIMIT])
        return prompt

    async def dispatch(self, prompt: str, max_tokens: int) -> str:
        logger.info("story.dispatch provider=%s", self.provider.name)
        text = await self.provider.generate(prompt, max_tokens)
        logger.info("story.generated words=%d", len(text.split(" ")))
        return text

    async def generate(self, request: StoryRequest) -> GeneratedStory:
        score = self.score(request)
        prompt = self.compose(request)
        text = await self.dispatch(prompt, score.token_limit)
        return GeneratedStory(text=text, score=score)


class StoryState(TypedDict, total=False):
    request: StoryRequest
    score: RichnessScore
    prompt: str
    story: str
    profile: dict[str, Any]


class StoryWorkflow:
    """Sequential story pipeline implemented with LangGraph nodes.

    score -> compose -> dispatch -> persist. A failing node aborts the run, so
    persistence only ever sees a successfully extracted story.
    """

    def __init__(self, orchestrator: GenerationOrchestrator, store: ProfileStore) -> None:
        self.orchestrator = orchestrator
        self.store = store
        self._graph: Any | None = None

    async def run(self, request: StoryRequest) -> StoryResult:
        final_state = await self._get_graph().ainvoke({"request": request})
        score: RichnessScore = final_state["score"]
        return StoryResult(
            story=final_state["story"],
            profile=final_state["profile"],
            content_sections=score.content_sections,
            token_limit=score.token_limit,
        )

    def _get_graph(self):
        if self._graph is None:
            self._graph = self._build_graph()
        return self._graph

    def _build_graph(self):
        from langgraph.graph import END, START, StateGraph

        async def score_node(state: StoryState) -> dict[str, Any]:
            return {"score": self.orchestrator.score(state["request"])}

        async def compose_node(state: StoryState) -> dict[str, Any]:
            return {"prompt": self.orchestrator.compose(state["request"])}

        async def dispatch_node(state: StoryState) -> dict[str, Any]:
            story = await self.orchestrator.dispatch(state["prompt"], state["score"].token_limit)
            return {"story": story}

        async def persist_node(state: StoryState) -> dict[str, Any]:
            profile = await self.store.save_story(state["request"], state["story"])
            return {"profile": profile}

        graph = StateGraph(StoryState)
        graph.add_node("score_step", score_node)
        graph.add_node("compose_step", compose_node)
        graph.add_node("dispatch_step", dispatch_node)
        graph.add_node("persist_step", persist_node)
        graph.add_edge(START, "score_step")
        graph.add_edge("score_step", "compose_step")
        graph.add_edge("compose_step", "dispatch_step")
        graph.add_edge("dispatch_step", "persist_step")
        graph.add_edge("persist_step", END)
        return graph.compile()
