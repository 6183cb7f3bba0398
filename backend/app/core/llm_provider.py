"""
Provider-agnostic LLM factory.

Switch LLM provider by changing env vars — no code changes needed:
  LLM_PROVIDER=gemini | openai | groq
  LLM_MODEL=gemini-2.0-flash | gpt-4o-mini | llama-3.1-70b-versatile
  LLM_FALLBACK_MODEL=<smaller model of the same provider>
  LLM_API_KEY=your-key
"""

from langchain_core.language_models import BaseChatModel

from app.config import get_settings


def create_llm(model: str | None = None, max_tokens: int | None = None) -> BaseChatModel:
    """Create a chat model instance based on env configuration.

    Args:
        model: Model name override (used for the fallback model).
        max_tokens: Output token budget; defaults to LLM_MAX_TOKENS.

    Returns:
        BaseChatModel: A LangChain-compatible chat model.

    Raises:
        ValueError: If provider is not supported.
    """
    settings = get_settings()
    model = model or settings.LLM_MODEL
    max_tokens = max_tokens or settings.LLM_MAX_TOKENS

    match settings.LLM_PROVIDER:
        case "gemini":
            from langchain_google_genai import ChatGoogleGenerativeAI

            return ChatGoogleGenerativeAI(
                model=model,
                google_api_key=settings.LLM_API_KEY,
                temperature=settings.LLM_TEMPERATURE,
                max_output_tokens=max_tokens,
            )

        case "openai":
            from langchain_openai import ChatOpenAI

            return ChatOpenAI(
                model=model,
                api_key=settings.LLM_API_KEY,
                temperature=settings.LLM_TEMPERATURE,
                max_tokens=max_tokens,
            )

        case "groq":
            from langchain_groq import ChatGroq

            return ChatGroq(
                model=model,
                api_key=settings.LLM_API_KEY,
                temperature=settings.LLM_TEMPERATURE,
                max_tokens=max_tokens,
            )

        case _:
            raise ValueError(
                f"Unknown LLM provider: '{settings.LLM_PROVIDER}'. "
                f"Supported: gemini, openai, groq"
            )


def create_embeddings():
    """Create an embedding model based on env configuration.

    Returns:
        Embeddings instance for vector generation.
    """
    settings = get_settings()

    match settings.EMBEDDING_PROVIDER:
        case "gemini":
            from langchain_google_genai import GoogleGenerativeAIEmbeddings

            return GoogleGenerativeAIEmbeddings(
                model=f"models/{settings.EMBEDDING_MODEL}",
                google_api_key=settings.LLM_API_KEY,
            )

        case "openai":
            from langchain_openai import OpenAIEmbeddings

            return OpenAIEmbeddings(
                model=settings.EMBEDDING_MODEL,
                api_key=settings.LLM_API_KEY,
                dimensions=settings.EMBEDDING_DIMENSIONS,
            )

        case _:
            raise ValueError(
                f"Unknown embedding provider: '{settings.EMBEDDING_PROVIDER}'. "
                f"Supported: gemini, openai"
            )
