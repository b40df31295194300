from abc import ABC, abstractmethod
from typing import Tuple, Optional, Dict, Any


class LLMProviderError(Exception):
    """Raised when a language-model provider call fails."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class BaseAIClient(ABC):
    """
    Abstract base class for AI model clients.
    All model-specific clients should inherit from this class and implement its methods.
    """

    provider_name = "unknown"

    @abstractmethod
    def __init__(self, api_key: str, **kwargs):
        """
        Initialize the AI client.

        Args:
            api_key: API key for the AI service
            **kwargs: Additional model-specific parameters
        """
        self.api_key = api_key
        self.model_name = kwargs.get('model_name')

    @abstractmethod
    def get_completion(self, prompt: str, **kwargs) -> Tuple[Optional[str], Optional[Dict[str, int]]]:
        """
        Get a completion from the AI model.

        Args:
            prompt: The input prompt to send to the model
            **kwargs: Additional parameters for the API call

        Returns:
            A tuple containing:
                - The generated text response (may be None or blank)
                - A dictionary with token usage information (or None if not available)

        Raises:
            LLMProviderError: If the provider call fails
        """
        pass

    def get_token_usage(self, response: Any) -> Optional[Dict[str, int]]:
        """
        Extract token usage information from the API response.
        Subclasses override this when the provider reports usage.

        Args:
            response: The raw response from the model API

        Returns:
            A dictionary with token usage information or None if not available
        """
        return None
