"""Prompt files for the remote classifier.

Each prompt is a YAML file with a version, model parameters, a system prompt
and a ``str.format`` style user prompt template.
"""

import yaml
from pathlib import Path
from string import Formatter
from typing import Dict, Any, Optional, Set
from logger import get_logger

logger = get_logger()

REQUIRED_KEYS = ("system_prompt", "user_prompt_template")


class PromptManager:
    """Loads prompt files once and renders them for a single request.

    Args:
        prompts_dir: Directory of the prompt YAML files. Defaults to the
            directory of this module.
    """

    def __init__(self, prompts_dir: Optional[Path] = None):
        self.prompts_dir = prompts_dir or Path(__file__).parent
        self._cache: Dict[str, Dict[str, Any]] = {}

    def load_prompt(self, prompt_name: str) -> Dict[str, Any]:
        """Read and validate a prompt file.

        Args:
            prompt_name: File name without the .yaml extension.

        Returns:
            The parsed prompt configuration.

        Raises:
            FileNotFoundError: If the prompt file does not exist.
            ValueError: If the file lacks a system prompt or user template.
        """
        if prompt_name in self._cache:
            return self._cache[prompt_name]

        prompt_file = self.prompts_dir / f"{prompt_name}.yaml"
        if not prompt_file.exists():
            raise FileNotFoundError(f"Prompt file not found: {prompt_file}")

        with open(prompt_file, "r", encoding="utf-8") as f:
            prompt_config = yaml.safe_load(f) or {}

        missing = [key for key in REQUIRED_KEYS if not prompt_config.get(key)]
        if missing:
            raise ValueError(f"Prompt '{prompt_name}' has no {', '.join(missing)}")

        logger.debug(
            f"Loaded prompt '{prompt_name}' "
            f"(version {prompt_config.get('version', 'unknown')})"
        )
        self._cache[prompt_name] = prompt_config
        return prompt_config

    def template_variables(self, prompt_name: str) -> Set[str]:
        """Names of the variables a prompt's user template expects."""
        template = self.load_prompt(prompt_name)["user_prompt_template"]
        return {name for _, name, _, _ in Formatter().parse(template) if name}

    def render_prompt(
        self, prompt_name: str, variables: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Render a prompt with the given variables.

        Args:
            prompt_name: Name of the prompt to render.
            variables: Values for the user template's placeholders.

        Returns:
            Dictionary with keys system_prompt, user_prompt, parameters and
            version.

        Raises:
            ValueError: If a placeholder has no value.
        """
        prompt_config = self.load_prompt(prompt_name)

        missing = sorted(self.template_variables(prompt_name) - variables.keys())
        if missing:
            raise ValueError(
                f"Prompt '{prompt_name}' is missing template variable(s): "
                f"{', '.join(missing)}"
            )

        return {
            "system_prompt": prompt_config["system_prompt"],
            "user_prompt": prompt_config["user_prompt_template"].format(**variables),
            "parameters": prompt_config.get("parameters", {}),
            "version": prompt_config.get("version", "unknown"),
        }
