"""
Analysis Contracts - Interfaces for the analysis domain.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ClassificationOracle(Protocol):
    """
    Generates a JSON classification of document text.

    The returned value is untrusted and goes through the validator.

    Example:
        >>> raw = await oracle.generate_json(prompt, system_instruction="...")
    """

    async def generate_json(
        self,
        prompt: str,
        system_instruction: str | None = None,
    ) -> Any:
        ...
