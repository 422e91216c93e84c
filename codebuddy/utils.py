"""
Utilities module - text helpers shared by the assistant and the CLI.
"""
import re


def extract_all_code_blocks(content: str) -> list[tuple[str, str]]:
    """
    Extract all code blocks from LLM response.
    Returns list of (language, code) tuples.
    """
    pattern = r'```(\w+)?\s*\n(.*?)```'
    matches = re.findall(pattern, content or "", re.DOTALL)

    return [(lang or "text", code.strip()) for lang, code in matches]


def truncate(text: str, limit: int = 50) -> str:
    """Shorten text for log lines."""
    text = text or ""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
