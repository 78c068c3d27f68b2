import os
from openai import AsyncOpenAI
from dotenv import load_dotenv
load_dotenv(override=True)


def get_openai_client():
    """
    Initializes and returns an async OpenAI client configured for OpenAI's API.
    """
    openai_api_key = os.getenv("OPENAI_API_KEY")
    if not openai_api_key:
        raise ValueError("OPENAI_API_KEY environment variable is not set.")

    return AsyncOpenAI(
        api_key=openai_api_key,
        base_url="https://api.openai.com/v1",
    )


def get_openrouter_client():
    """
    Initializes and returns an async OpenAI client configured for OpenRouter.
    """
    openrouter_api_key = os.getenv("OPENROUTER_API_KEY")
    if not openrouter_api_key:
        raise ValueError("OPENROUTER_API_KEY environment variable is not set.")

    return AsyncOpenAI(
        api_key=openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
        default_headers={
            "X-Title": "aichat",
        }
    )


def get_groq_client():
    """
    Initializes and returns an async OpenAI client configured for Groq's API.
    """
    groq_api_key = os.getenv("GROQ_API_KEY")
    if not groq_api_key:
        raise ValueError("GROQ_API_KEY environment variable is not set.")

    return AsyncOpenAI(
        api_key=groq_api_key,
        # OpenAI-compatible endpoint
        base_url="https://api.groq.com/openai/v1",
    )


CLIENT_FACTORIES = {
    "openai": get_openai_client,
    "openrouter": get_openrouter_client,
    "groq": get_groq_client,
}


def get_client(provider: str = "openai"):
    """Return a client for the named provider."""
    factory = CLIENT_FACTORIES.get((provider or "openai").lower())
    if factory is None:
        raise ValueError(f"Unknown provider: {provider}")
    return factory()
