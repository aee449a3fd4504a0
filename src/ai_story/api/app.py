import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from ai_story.service.generator import StoryService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
# httpx logs full request URLs at INFO, and the Gemini key travels as a query parameter.
logging.getLogger("httpx").setLevel(logging.WARNING)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

app = FastAPI(title="ai-story", version="0.1.0")
service = StoryService()


@app.get("/healthz")
async def healthz() -> dict:
    return {"status": "ok"}


@app.options("/generate-ai-story")
async def generate_story_preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@app.post("/generate-ai-story")
async def generate_story(request: Request) -> JSONResponse:
    body = await request.body()
    outcome = await service.generate(body)
    return JSONResponse(content=outcome.payload, status_code=outcome.status_code, headers=CORS_HEADERS)
