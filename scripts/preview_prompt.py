#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _bootstrap_pythonpath() -> None:
    src = _repo_root() / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))


_bootstrap_pythonpath()

from ai_story.api.schemas import GenerateStoryRequest  # noqa: E402
from ai_story.pipeline.prompt import PromptComposer  # noqa: E402
from ai_story.pipeline.richness import TokenBudgetPlanner  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render the story prompt and token budget for a request body without calling a provider."
    )
    parser.add_argument("input", help="JSON file shaped like a POST /generate-ai-story body.")
    parser.add_argument("--meta-only", action="store_true", help="Print only section count and token budget.")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    body = Path(args.input).read_text(encoding="utf-8")
    request = GenerateStoryRequest.model_validate_json(body).to_story_request()
    score = TokenBudgetPlanner().score(request)
    print(f"[preview] {json.dumps(score.as_meta())}")
    if not args.meta_only:
        print(PromptComposer().compose(request))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
