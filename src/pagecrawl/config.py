from dotenv import load_dotenv
import os

load_dotenv()  # Loads variables from .env file


class Settings:
    """
    Manages application settings loaded from environment variables.

    GROQ_API_KEY, GROQ_MODEL and GROQ_BASE_URL are read by MarkdownConverter
    when it is constructed, and BrowserConfig.from_env reads
    PLAYWRIGHT_EXECUTABLE_PATH.
    """
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8787"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    USER_AGENT = os.getenv("USER_AGENT", "pagecrawl/0.1")


settings = Settings()
