"""
Prompt templates for Code Buddy's AI helper.
"""

# =============================================================================
# SYSTEM PROMPT
# =============================================================================

SYSTEM_PROMPT = (
    "You are a code debugger and guider for young coders. "
    "Explain errors and code in simple, encouraging language, using analogies and avoiding jargon. "
    "Suggest fixes clearly and provide educational tips."
)


# =============================================================================
# CODE ANALYSIS PROMPTS
# =============================================================================

ANALYZE_PROMPT = """Code in {language}:
```{language}
{code}
```

{context}

Please analyze this code and provide:
1. A simple explanation of what this code does or tries to do
2. Any errors or issues in the code, explained in kid-friendly terms
3. Suggestions to improve or fix the code
4. One educational tip related to a concept in this code
"""

ANALYZE_CONTEXT = "Additional context: {context}"


# =============================================================================
# CHAT PROMPTS
# =============================================================================

CHAT_LANGUAGE_PREFIX = "[User is coding in {language}] {message}"

CONNECTION_TEST_PROMPT = "Hello, are you working?"
