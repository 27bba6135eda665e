"""OpenAI provider implementation using structured outputs."""

from typing import Any, Dict, Optional
from pydantic import BaseModel
from openai import OpenAI
from errors import ClassificationError
from llm.providers.base import LLMProvider
from llm.prompts.loader import PromptManager
from models.category import Category, EXPENSE_CATEGORIES
from logger import get_logger

logger = get_logger()


# Pydantic model for structured output
class FragmentParse(BaseModel):
    """Transaction fields extracted from one statement."""

    amount: Optional[float] = None
    type: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None


class OpenAIProvider(LLMProvider):
    """OpenAI implementation using structured outputs for reliable JSON parsing."""

    def __init__(self, api_key: str, model: Optional[str] = None, client=None):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key.
            model: Model to use (e.g., "gpt-4o-mini"). If None, uses prompt default.
            client: Optional preconfigured OpenAI client.
        """
        self.client = client or OpenAI(api_key=api_key)
        self.model = model
        self.prompt_manager = PromptManager()

    def parse_fragment(self, fragment: str) -> Dict[str, Any]:
        """Parse one statement fragment with OpenAI structured outputs.

        Raises:
            ClassificationError: If the API call fails or returns no result.
        """
        rendered_prompt = self.prompt_manager.render_prompt(
            "classification",
            {
                "fragment": fragment,
                "income_category": Category.INCOME.value,
                "saving_category": Category.SAVING.value,
                "investment_category": Category.INVESTMENT.value,
                "loan_category": Category.LOAN_DEBT.value,
                "hang_out_category": Category.HANG_OUT.value,
                "expense_categories": ", ".join(
                    f'"{c.value}"' for c in EXPENSE_CATEGORIES if c != Category.LOAN_DEBT
                ),
            },
        )

        model = self.model or rendered_prompt["parameters"].get("model", "gpt-4o-mini")
        temperature = rendered_prompt["parameters"].get("temperature", 0.1)
        max_tokens = rendered_prompt["parameters"].get("max_tokens", 500)

        logger.debug(
            f"Parsing fragment with {model}, prompt version: {rendered_prompt['version']}"
        )

        try:
            response = self.client.beta.chat.completions.parse(
                model=model,
                messages=[
                    {"role": "system", "content": rendered_prompt["system_prompt"]},
                    {"role": "user", "content": rendered_prompt["user_prompt"]},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                response_format=FragmentParse,
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise ClassificationError(
                f"Could not understand '{fragment}': {e}", fragment=fragment
            ) from e

        result = response.choices[0].message.parsed
        if result is None:
            logger.warning("OpenAI returned null parsed response")
            raise ClassificationError(
                f"Could not understand '{fragment}'", fragment=fragment
            )

        return result.model_dump()
