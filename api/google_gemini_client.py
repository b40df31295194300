from typing import Optional, Dict, Any, Tuple

from google import genai
from .base_client import BaseAIClient, LLMProviderError


class GeminiClient(BaseAIClient):
    """
    A client for interacting with the Google Gemini API using the google.genai package.
    Provider failures are raised as LLMProviderError so callers can retry.
    """

    provider_name = "gemini"

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash", **kwargs):
        """
        Initialize the Gemini client.

        Args:
            api_key: The Google Gemini API key
            model_name: The name of the model to use (default: gemini-2.5-flash)
            **kwargs: Additional keyword arguments
        """
        super().__init__(api_key, **kwargs)

        if not api_key:
            raise ValueError("API key is required for Gemini")

        self.client = genai.Client(api_key=api_key)
        self.model_name = model_name

    def get_completion(self, prompt: str, **kwargs) -> Tuple[Optional[str], Optional[Dict[str, int]]]:
        """
        Get a completion from the Gemini API.

        Args:
            prompt: The input prompt to send to the model
            **kwargs: Additional parameters for the API call
                - model: Override the default model for this call
                - temperature: Controls randomness (0.0 to 1.0)
                - max_output_tokens: Maximum number of tokens to generate

        Returns:
            A tuple of (response_text, usage_dict)
        """
        model_name = kwargs.get('model', self.model_name)
        config = {}
        if 'temperature' in kwargs:
            config['temperature'] = kwargs['temperature']
        if 'max_output_tokens' in kwargs:
            config['max_output_tokens'] = kwargs['max_output_tokens']

        try:
            response = self.client.models.generate_content(
                model=model_name,
                contents=prompt,
                config=config or None,
            )
        except Exception as e:
            raise LLMProviderError(self.provider_name, f"{type(e).__name__}: {e}") from e

        text = getattr(response, 'text', None)
        return text, self.get_token_usage(response)

    def get_token_usage(self, response: Any) -> Optional[Dict[str, int]]:
        usage_metadata = getattr(response, 'usage_metadata', None)
        if usage_metadata is None:
            return None
        return {
            'prompt_tokens': getattr(usage_metadata, 'prompt_token_count', 0) or 0,
            'completion_tokens': getattr(usage_metadata, 'candidates_token_count', 0) or 0,
            'total_tokens': getattr(usage_metadata, 'total_token_count', 0) or 0,
        }
