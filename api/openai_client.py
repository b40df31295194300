import openai
from typing import Optional, Dict, Any, Tuple
from .base_client import BaseAIClient, LLMProviderError


class OpenAIClient(BaseAIClient):
    """
    A client for interacting with the OpenAI API.
    Provider failures are raised as LLMProviderError so callers can retry.
    """

    provider_name = "openai"

    def __init__(self, api_key: str, model_name: str = "gpt-4o-mini", **kwargs):
        """
        Initialize the OpenAI client.

        Args:
            api_key: The OpenAI API key
            model_name: The name of the model to use (default: gpt-4o-mini)
            **kwargs: Additional keyword arguments
        """
        super().__init__(api_key, **kwargs)
        self.client = openai.OpenAI(api_key=api_key)
        self.model_name = model_name

    def get_completion(self, prompt: str, **kwargs) -> Tuple[Optional[str], Optional[Dict[str, int]]]:
        """
        Get a completion from the OpenAI API.

        Args:
            prompt: The input prompt to send to the model
            **kwargs: Additional parameters for the API call
                - model: Override the default model for this call
                - temperature: Controls randomness (0.0 to 2.0)
                - max_tokens: Maximum number of tokens to generate

        Returns:
            A tuple of (response_text, usage_dict)
        """
        model = kwargs.get('model', self.model_name)
        temperature = kwargs.get('temperature', 0.3)
        max_tokens = kwargs.get('max_tokens', 1024)

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens
            )
        except openai.OpenAIError as e:
            raise LLMProviderError(self.provider_name, f"{type(e).__name__}: {e}") from e

        if not response.choices:
            return None, self.get_token_usage(response)
        return response.choices[0].message.content, self.get_token_usage(response)

    def get_token_usage(self, response: Any) -> Optional[Dict[str, int]]:
        usage = getattr(response, 'usage', None)
        if usage is None:
            return None
        return {
            'prompt_tokens': usage.prompt_tokens,
            'completion_tokens': usage.completion_tokens,
            'total_tokens': usage.total_tokens
        }
