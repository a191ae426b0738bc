"""SSE relay between a browser chat UI and Azure OpenAI / OpenAI."""

__version__ = "1.0.0"
