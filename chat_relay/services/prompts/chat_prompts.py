"""
Chat prompts for LLM interactions.
"""

CHAT_SYSTEM_PROMPT = (
    "You are a helpful, professional AI assistant running on Azure App Service."
)

# Streamed back verbatim when no API key is configured
MOCK_CHAT_RESPONSE = (
    "I am a mock AI assistant. Please configure your `AZURE_OPENAI_API_KEY` or "
    "`OPENAI_API_KEY` in the App Service configuration to get real responses.\n\n"
    "Here is some code to prove I render markdown:\n"
    "```javascript\n"
    "console.log('Hello Azure!');\n"
    "```"
)
