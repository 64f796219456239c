from lendaria.infrastructure.ai.completion_client import (
    CompletionClient,
    GeminiCompletionClient,
    OpenAICompletionClient,
    build_completion_client,
)

__all__ = [
    "CompletionClient",
    "GeminiCompletionClient",
    "OpenAICompletionClient",
    "build_completion_client",
]
