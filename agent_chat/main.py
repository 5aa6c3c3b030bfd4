"""Main FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agent_chat import __version__
from agent_chat.api.endpoints import router
from agent_chat.config import ClientConfig
from agent_chat.utils.logging import setup_logging

config = ClientConfig.from_env()
setup_logging(config.log_config())

app = FastAPI(
    title="Agent Chat",
    description="Thread controller for a streaming LangGraph agent, exposed over HTTP for thin clients.",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    tags_metadata=[
        {
            "name": "Thread",
            "description": "Submit turns, cancel runs, switch threads and read the resolved view.",
        },
        {
            "name": "Health",
            "description": "Service health monitoring and status checks.",
        },
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("agent_chat.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
