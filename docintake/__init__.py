"""
docintake - Turn uploaded documents into text and validated, typed items.

Example:
    >>> from docintake.domains.ingestion import extract_text_from_buffer
    >>> result = await extract_text_from_buffer(data, "application/pdf", "plan.pdf")
    >>> result.extraction_method
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
