"""Readable main-body text extraction from raw HTML."""
import logging

from bs4 import BeautifulSoup

from vidyagiri.services.pipeline.text_cleaner import clean_text, collapse_whitespace

logger = logging.getLogger(__name__)

# Elements that never carry article text
NON_CONTENT_TAGS = (
    "script",
    "style",
    "nav",
    "footer",
    "iframe",
    "img",
    "header",
    "aside",
    "form",
    "button",
)

# Typical main-content containers, checked before falling back to <body>
CONTENT_SELECTORS = "article, main, .content, .post-content"


def extract_main_content(html: str | None) -> str:
    """
    Strip an HTML document down to its readable main text.

    Non-content elements are removed first. Text is taken from the outermost
    content containers when they hold any text, otherwise from the whole
    body. All whitespace runs are collapsed to single spaces.

    Args:
        html: Raw HTML document

    Returns:
        Extracted text, or empty string if nothing could be extracted
    """
    if not html or not html.strip():
        return ""

    try:
        soup = BeautifulSoup(html, "html.parser")

        for element in soup.find_all(NON_CONTENT_TAGS):
            element.decompose()

        content = ""
        containers = soup.select(CONTENT_SELECTORS)
        if containers:
            # Nested matches (e.g. <main><article>) would repeat their text
            matched = {id(node) for node in containers}
            outermost = [
                node for node in containers
                if not any(id(parent) in matched for parent in node.parents)
            ]
            content = " ".join(node.get_text(" ") for node in outermost)

        if not content.strip():
            root = soup.body or soup
            content = root.get_text(" ")

        return collapse_whitespace(clean_text(content))
    except Exception as e:
        logger.warning(f"Content extraction failed: {e}")
        return ""
