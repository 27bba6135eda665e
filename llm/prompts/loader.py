"""Prompt loading and management."""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from logger import get_logger

logger = get_logger()

REQUIRED_KEYS = ("system_prompt", "user_prompt_template")


class PromptManager:
    """Loads prompt definitions from YAML files next to this module and fills
    in their placeholders with str.format.

    A prompt file holds ``version``, ``parameters`` (model defaults), a
    ``system_prompt`` and a ``user_prompt_template``.
    """

    def __init__(self, prompts_dir: Optional[Path] = None):
        self.prompts_dir = prompts_dir or Path(__file__).parent
        self._cache: Dict[str, Dict[str, Any]] = {}

    def load_prompt(self, prompt_name: str) -> Dict[str, Any]:
        """Load a prompt definition, caching it per manager.

        Raises:
            FileNotFoundError: If the prompt file doesn't exist.
            ValueError: If the file lacks a system prompt or user template.
            yaml.YAMLError: If YAML is invalid.
        """
        if prompt_name not in self._cache:
            prompt_file = self.prompts_dir / f"{prompt_name}.yaml"
            if not prompt_file.exists():
                raise FileNotFoundError(f"Prompt file not found: {prompt_file}")

            logger.debug(f"Loading prompt from {prompt_file}")
            prompt_config = yaml.safe_load(prompt_file.read_text(encoding="utf-8")) or {}

            missing = [key for key in REQUIRED_KEYS if key not in prompt_config]
            if missing:
                raise ValueError(
                    f"Prompt '{prompt_name}' is missing: {', '.join(missing)}"
                )
            self._cache[prompt_name] = prompt_config

        return self._cache[prompt_name]

    def render_prompt(
        self, prompt_name: str, variables: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Render both prompt texts of ``prompt_name`` with ``variables``.

        Returns:
            Dictionary with keys system_prompt, user_prompt, parameters and
            version.

        Raises:
            KeyError: If a template references a variable that was not given.
        """
        prompt_config = self.load_prompt(prompt_name)

        return {
            "system_prompt": prompt_config["system_prompt"].format(**variables),
            "user_prompt": prompt_config["user_prompt_template"].format(**variables),
            "parameters": prompt_config.get("parameters", {}),
            "version": prompt_config.get("version", "unknown"),
        }
