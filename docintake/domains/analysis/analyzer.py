"""
Document Analyzer - Classify extracted text into importable items.

The oracle proposes a JSON classification; the validator decides what of
it is usable.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from .models import AnalysisConfig, AnalysisResult
from .validator import validate_analysis_result

if TYPE_CHECKING:
    from .contracts import ClassificationOracle

logger = logging.getLogger(__name__)

__all__ = ["DocumentAnalyzer", "build_analysis_prompt"]

SYSTEM_INSTRUCTION = (
    "You sort documents about food, exercise, habits and schedules into "
    "structured items. Reply with JSON only."
)

ANALYSIS_PROMPT = """Extract the structured items in the document below.

Item types:
- meal: recipes, meal plans, portion rules
- workout: exercise sessions, sets/reps, rest days
- routine: step-by-step habits such as morning or evening routines
- calendar: dated or recurring events and reminders
- plan: the overall program name, if the document is a named program

For each item give id, itemType, title, description, details (object),
destinationSystem (nutrition, workout, routines or calendar), confidence
(0-100) and isSelected (true).

Reply with a JSON object with keys documentTitle, summary, confidence (0-100),
items and, if any major section has confidence below 60, clarifyingQuestions
(list of strings).

DOCUMENT:
{text}"""


def build_analysis_prompt(text: str, max_chars: int = 30000) -> str:
    """Render the classification prompt, keeping the first ``max_chars`` characters."""
    return ANALYSIS_PROMPT.format(text=text[:max_chars])


class DocumentAnalyzer:
    """
    Turns extracted document text into a validated AnalysisResult.

    Example:
        >>> analyzer = DocumentAnalyzer(GeminiClient())
        >>> result = await analyzer.analyze(extraction.text)
        >>> result.primary_category if result else "unusable"
    """

    def __init__(
        self,
        oracle: ClassificationOracle,
        config: AnalysisConfig | None = None,
    ) -> None:
        """
        Initialize analyzer.

        Args:
            oracle: JSON classification client (GeminiClient in production)
            config: Prompt and vote settings, defaults if None
        """
        self._oracle = oracle
        self.config = config or AnalysisConfig()

    async def analyze(self, text: str) -> AnalysisResult | None:
        """
        Classify document text.

        Returns:
            Validated result, or None when the oracle output is unusable

        Raises:
            LLMError: oracle transport or rate-limit failure
        """
        start_time = time.time()
        if len(text) > self.config.max_prompt_chars:
            logger.info(
                "Truncating %d chars to %d for analysis", len(text), self.config.max_prompt_chars
            )

        raw = await self._oracle.generate_json(
            prompt=build_analysis_prompt(text, self.config.max_prompt_chars),
            system_instruction=SYSTEM_INSTRUCTION,
        )
        result = validate_analysis_result(raw, self.config.majority_threshold)

        if result is None:
            logger.warning("Analysis output unusable after %.1fs", time.time() - start_time)
        else:
            logger.info(
                "Analysis complete: %d items, category=%s in %.1fs",
                result.item_count,
                result.primary_category.value,
                time.time() - start_time,
            )
        return result
