"""
Mock Ollama server that responds instantly.
Used for running the proxy and load testing it without real LLM inference.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

MODELS = [
    {
        "name": "llama3.1:latest",
        "modified_at": "2024-07-23T10:15:42.123456789-07:00",
        "size": 4661230977,
        "digest": "42182419e9508c30c4b1fe55015f06b65f4ca4b9e28a744be55008d21998a093",
    },
    {
        "name": "mistral:latest",
        "modified_at": "2024-06-02T08:00:00Z",
        "size": 4113301090,
        "digest": "2ae6f6dd7a3dd734790bbbf58b8909a606e0e7e97e94b7604e0aa7ae4490e6d8",
    },
]

app = FastAPI()


def _known(model: str) -> bool:
    names = {m["name"] for m in MODELS}
    return model in names or f"{model}:latest" in names


@app.post("/api/chat")
async def chat(request: Request):
    body = await request.json()
    model = body.get("model", "llama3.1")
    if not _known(model):
        return JSONResponse(
            status_code=404,
            content={"error": f'model "{model}" not found, try pulling it first'},
        )

    last = (body.get("messages") or [{}])[-1].get("content", "")
    return JSONResponse({
        "model": model,
        "created_at": "2024-07-23T17:20:00.000000Z",
        "message": {"role": "assistant", "content": f"Mock response to: {last}"},
        "done": True,
        "total_duration": 1200000,
        "load_duration": 100000,
        "prompt_eval_count": 10,
        "prompt_eval_duration": 300000,
        "eval_count": 5,
        "eval_duration": 700000,
    })


@app.get("/api/tags")
async def tags():
    return {"models": MODELS}


if __name__ == "__main__":
    print("Starting mock Ollama on port 11434...")
    uvicorn.run(app, host="0.0.0.0", port=11434)
