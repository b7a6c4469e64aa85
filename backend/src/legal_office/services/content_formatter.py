"""
Splits an assistant reply into typed blocks the client can render.
"""

from typing import Any, Dict, List, Optional

TITLE_MARKERS = ("مذكرة", "دفوع")
ARTICLE_MARKER = "المادة"
WARNING_MARKERS = ("تحذير", "ملاحظة هامة")
LIST_BULLETS = ("-", "•")


def _block(block_type: str, content: str) -> Dict[str, Any]:
    return {"type": block_type, "content": content, "items": []}


def format_legal_content(text: str) -> List[Dict[str, Any]]:
    """
    Classify each non-empty line of ``text``.

    title: mentions a memo or defences. article: cites a law article.
    section: contains a colon and collects the bullet lines after it.
    warning: a caution or important note. Anything else is plain text.
    """
    blocks: List[Dict[str, Any]] = []
    section: Optional[Dict[str, Any]] = None

    def close_section():
        nonlocal section
        if section is not None:
            blocks.append(section)
            section = None

    for raw_line in (text or "").splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if any(marker in line for marker in TITLE_MARKERS):
            close_section()
            blocks.append(_block("title", line))
            continue

        if ARTICLE_MARKER in line:
            close_section()
            blocks.append(_block("article", line))
            continue

        if ":" in line:
            close_section()
            head, _, rest = line.partition(":")
            section = _block("section", f"{head.strip()}:{rest.strip()}")
            continue

        if line.startswith(LIST_BULLETS):
            item = line[1:].strip()
            if section is not None:
                section["items"].append(item)
            else:
                blocks.append(_block("text", item))
            continue

        close_section()
        if any(marker in line for marker in WARNING_MARKERS):
            blocks.append(_block("warning", line))
        else:
            blocks.append(_block("text", line))

    close_section()
    return blocks
