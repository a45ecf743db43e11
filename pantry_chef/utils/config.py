"""Configuration management for Pantry Chef.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()

SUPPORTED_ASPECT_RATIOS = ("1:1", "3:4", "4:3", "9:16", "16:9")
SUPPORTED_OUTPUT_MIME_TYPES = ("image/jpeg", "image/png")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Recipe Model: text model that writes the recipes as structured JSON
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        # Image Detection Model: vision model that lists ingredients found in a photo
        self.IMAGE_DETECTION_MODEL: str = os.getenv("IMAGE_DETECTION_MODEL", "gemini-2.5-flash")
        # Image Generation Model: Imagen model that illustrates each recipe
        self.IMAGE_GENERATION_MODEL: str = os.getenv("IMAGE_GENERATION_MODEL", "imagen-4.0-generate-001")
        # Number of recipes requested per generation run. Default: 3
        self.MAX_RECIPES: int = int(os.getenv("MAX_RECIPES", "3"))
        # Maximum uploaded image size (in MB). Default: 5 MB
        self.MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "5"))
        # Temperature: higher values give more varied recipe ideas
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))
        # Max Output Tokens: three full recipes fit comfortably in 4096
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "4096"))
        # Generated dish photo shape and encoding
        self.IMAGE_ASPECT_RATIO: str = os.getenv("IMAGE_ASPECT_RATIO", "4:3")
        self.IMAGE_OUTPUT_MIME_TYPE: str = os.getenv("IMAGE_OUTPUT_MIME_TYPE", "image/jpeg")

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ValueError: If the API key is missing or invalid values provided.
        """
        if not self.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")
        if not (1 <= self.MAX_RECIPES <= 10):
            raise ValueError(f"MAX_RECIPES must be between 1 and 10, got: {self.MAX_RECIPES}")
        if self.MAX_IMAGE_SIZE_MB < 1:
            raise ValueError(f"MAX_IMAGE_SIZE_MB must be at least 1, got: {self.MAX_IMAGE_SIZE_MB}")
        if not (0.0 <= self.TEMPERATURE <= 2.0):
            raise ValueError(
                f"TEMPERATURE must be between 0.0 and 2.0, got: {self.TEMPERATURE}"
            )
        if self.MAX_OUTPUT_TOKENS < 512:
            raise ValueError(
                f"MAX_OUTPUT_TOKENS must be at least 512, got: {self.MAX_OUTPUT_TOKENS}"
            )
        if self.IMAGE_ASPECT_RATIO not in SUPPORTED_ASPECT_RATIOS:
            raise ValueError(
                f"IMAGE_ASPECT_RATIO must be one of {', '.join(SUPPORTED_ASPECT_RATIOS)}, "
                f"got: {self.IMAGE_ASPECT_RATIO}"
            )
        if self.IMAGE_OUTPUT_MIME_TYPE not in SUPPORTED_OUTPUT_MIME_TYPES:
            raise ValueError(
                f"IMAGE_OUTPUT_MIME_TYPE must be 'image/jpeg' or 'image/png', got: {self.IMAGE_OUTPUT_MIME_TYPE}"
            )


# Module-level config instance. Validated by the Gemini service on construction,
# so the pipeline itself can run against any GenerationService without an API key.
config = Config()
