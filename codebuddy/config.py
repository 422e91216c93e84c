"""
Configuration module for Code Buddy.
Centralizes all environment variable loading, service settings and logging setup.
"""
import logging
import os
from typing import Literal, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

load_dotenv()


# =============================================================================
# Model Configuration
# =============================================================================

def get_openai_model() -> str:
    """Get OpenAI model from environment or default."""
    return os.environ.get("OPENAI_MODEL", "gpt-4o")


def get_gemini_model() -> str:
    """Get Gemini model from environment or default."""
    return os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")


def get_model_for_provider(provider: Literal["openai", "gemini"]) -> str:
    """Get the configured model for the given provider."""
    if provider == "openai":
        return get_openai_model()
    else:
        return get_gemini_model()


# =============================================================================
# API Keys
# =============================================================================

def get_openai_api_key() -> Optional[str]:
    """Get OpenAI API key from environment."""
    key = os.environ.get("OPENAI_API_KEY", "")
    if key and key != "your-openai-api-key-here":
        return key
    return None


def get_gemini_api_key() -> Optional[str]:
    """Get Gemini API key from environment."""
    key = os.environ.get("GEMINI_API_KEY", "")
    if key and key != "your-gemini-api-key-here":
        return key
    return None


# =============================================================================
# Provider Configuration
# =============================================================================

def get_available_providers() -> list[str]:
    """Get list of available AI providers based on configured API keys."""
    providers = []
    if get_gemini_api_key():
        providers.append("gemini")
    if get_openai_api_key():
        providers.append("openai")
    return providers


def get_default_provider() -> Literal["openai", "gemini"]:
    """Get the default provider from environment, else the first one with a key."""
    provider = os.environ.get("DEFAULT_PROVIDER", "").lower()
    if provider in ("openai", "gemini"):
        return provider
    available = get_available_providers()
    if available:
        return available[0]
    return "gemini"


def get_api_key_for_provider(provider: Literal["openai", "gemini"]) -> Optional[str]:
    """Get the API key for the given provider."""
    if provider == "openai":
        return get_openai_api_key()
    else:
        return get_gemini_api_key()


# =============================================================================
# Code Execution (Judge0)
# =============================================================================

def get_judge0_api_url() -> str:
    return os.environ.get("JUDGE0_API_URL", "https://judge0-ce.p.rapidapi.com").rstrip("/")


def get_judge0_api_key() -> Optional[str]:
    return os.environ.get("JUDGE0_API_KEY") or None


def get_judge0_host() -> str:
    return os.environ.get("JUDGE0_HOST", "judge0-ce.p.rapidapi.com")


def get_judge0_poll_interval() -> float:
    """Seconds between result polls."""
    return float(os.environ.get("JUDGE0_POLL_INTERVAL", "1.0"))


def get_judge0_max_polls() -> int:
    return int(os.environ.get("JUDGE0_MAX_POLLS", "10"))


# =============================================================================
# Server & Editor
# =============================================================================

def get_files_dir() -> str:
    return os.environ.get("FILES_DIR", "user_files")


def get_debounce_seconds() -> float:
    """Delay between the last keystroke and a diagnostic pass."""
    return int(os.environ.get("DEBOUNCE_MS", "500")) / 1000


def get_port() -> int:
    return int(os.environ.get("PORT", "5002"))


def get_log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").upper()


# =============================================================================
# Utility
# =============================================================================

def setup_logging(level: Optional[str] = None) -> None:
    """Route all loggers through rich."""
    logging.basicConfig(
        level=level or get_log_level(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def print_config(console: Optional[Console] = None):
    """Print current configuration (for debugging)."""
    console = console or Console()
    console.print("[bold]Code Buddy Configuration:[/bold]")
    console.print(f"  Default Provider: {get_default_provider()}")
    console.print(f"  Gemini Model: {get_gemini_model()}")
    console.print(f"  OpenAI Model: {get_openai_model()}")
    console.print(f"  Available Providers: {get_available_providers()}")
    console.print(f"  Judge0 URL: {get_judge0_api_url()}")
    console.print(f"  Judge0 Key: {'set' if get_judge0_api_key() else 'not set'}")
    console.print(f"  Files Dir: {get_files_dir()}")
    console.print(f"  Debounce: {int(get_debounce_seconds() * 1000)} ms")
    console.print(f"  Port: {get_port()}")
