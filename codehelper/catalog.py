"""
Persona catalog: maps an operation id to its system prompt and response field.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from codehelper.constants import PERSONAS


class PromptSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    operation_id: str = Field(..., description="Route name of the persona, e.g. 'review'.")
    system_prompt: str = Field(..., description="Fixed instruction text sent as the system message.")
    response_field: str = Field(..., description="Key the completion text is returned under.")


class PromptCatalog:
    """Immutable lookup table of persona prompts."""

    def __init__(self, specs: Iterable[PromptSpec]):
        """
        Build the catalog.

        Args:
            specs: Prompt specs, one per operation id.

        Raises:
            ValueError: If an operation id appears more than once.
        """
        self._specs: Dict[str, PromptSpec] = {}
        for spec in specs:
            if spec.operation_id in self._specs:
                raise ValueError(f"Duplicate operation id: {spec.operation_id}")
            self._specs[spec.operation_id] = spec

    @classmethod
    def from_triples(cls, triples: Iterable[Tuple[str, str, str]]) -> "PromptCatalog":
        return cls(
            PromptSpec(operation_id=op, system_prompt=prompt, response_field=field)
            for op, prompt, field in triples
        )

    @classmethod
    def default(cls) -> "PromptCatalog":
        """Catalog of the five personas shipped with the deployment."""
        return cls.from_triples(PERSONAS)

    def lookup(self, operation_id: str) -> Optional[PromptSpec]:
        """
        Resolve an operation id.

        Returns:
            The matching PromptSpec, or None if the id is unknown.
        """
        return self._specs.get(operation_id)

    def operation_ids(self) -> List[str]:
        return list(self._specs)

    def __iter__(self) -> Iterator[PromptSpec]:
        return iter(list(self._specs.values()))

    def __len__(self) -> int:
        return len(self._specs)
