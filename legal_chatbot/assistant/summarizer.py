"""
Follow-up answering from the previous assistant message.

Everything here is plain text processing: a heuristic bullet summarizer and
extractors for numbered action steps, used to answer "tóm tắt", "tóm lại" or
"cần làm gì" without any search.
"""

from __future__ import annotations

import re
from typing import List, Optional

NOTHING_TO_SUMMARIZE = "Không có nội dung trước đó để tóm tắt."
SUMMARY_PREFIX = "Tóm tắt ngắn gọn nội dung trước đó:\n\n"

MAX_BULLETS = 7
MAX_KEY_SENTENCES = 6
MAX_IMPORTANT_PARTS = 5
MAX_RECAP_PARAGRAPHS = 3

BULLET_PATTERN = re.compile(r"^[-*•\d+.)]\s*")
SENTENCE_SPLIT_PATTERN = re.compile(r"(?<=[.!?])\s+")
KEY_SENTENCE_PATTERNS = (
    re.compile(r"không có|không tồn tại|không ban hành|chưa ban hành", re.IGNORECASE),
    re.compile(r"là văn bản pháp luật cao nhất|văn bản pháp luật cao nhất|văn bản chính", re.IGNORECASE),
    re.compile(r"hiệu lực|ngày có hiệu lực|ban hành", re.IGNORECASE),
    re.compile(r"quy định về|bao gồm|gồm các", re.IGNORECASE),
    re.compile(r"tóm lại|kết luận|tổng kết", re.IGNORECASE),
)

WHAT_TO_DO_PATTERN = re.compile(
    r"(tóm lại.*làm gì|tổng kết.*làm|kết luận.*làm|cần làm gì|phải làm gì|nên làm gì)", re.IGNORECASE
)
RECAP_PATTERN = re.compile(r"^(tóm lại|tổng kết|kết luận|vậy|thì|vậy thì)", re.IGNORECASE)
NEXT_STEPS_PATTERN = re.compile(r"(làm gì|phải làm|nên làm|cần làm|bước tiếp theo|tiếp theo)", re.IGNORECASE)

STEPS_SECTION_PATTERN = re.compile(
    r"(?:Các bước|Bước|Thực hiện|Nên thực hiện|Cần thực hiện)[\s\S]{0,2000}", re.IGNORECASE
)
NUMBERED_STEP_PATTERN = re.compile(r"\d+\.\s*[^\n]+(?:\n+[^\d\n]+)*")
IMPORTANT_PART_PATTERN = re.compile(r"(?:Công ty|Bạn|Người|Cần|Phải|Nên)[^.]+\.")


def summarize_text(text: Optional[str]) -> str:
    """Condense a previous answer into ``•`` bullets.

    Existing bullet or numbered lists are reused when there are at least
    three of them (first seven kept). Otherwise sentences carrying key legal
    markers are picked (up to six), falling back to the first six sentences.
    """
    cleaned = (text or "").strip()
    if not cleaned:
        return NOTHING_TO_SUMMARIZE

    lines = [line.strip() for line in re.split(r"\r?\n", cleaned)]
    lines = [line for line in lines if line]
    bullet_lines = [line for line in lines if BULLET_PATTERN.match(line)]
    if len(bullet_lines) >= 3:
        return "\n".join(BULLET_PATTERN.sub("• ", line, count=1) for line in bullet_lines[:MAX_BULLETS])

    sentences = [s.strip() for s in SENTENCE_SPLIT_PATTERN.split(re.sub(r"\n+", " ", cleaned))]
    sentences = [s for s in sentences if s]

    picked: List[str] = []
    for sentence in sentences:
        if any(pattern.search(sentence) for pattern in KEY_SENTENCE_PATTERNS):
            picked.append(sentence)
        if len(picked) >= MAX_KEY_SENTENCES:
            break

    basis = picked or sentences[:MAX_KEY_SENTENCES]
    return "\n".join(f"• {sentence}" for sentence in basis)


def extract_numbered_steps(text: str) -> List[str]:
    """Numbered items (``1. ...``) including their unnumbered continuation lines."""
    return NUMBERED_STEP_PATTERN.findall(text)


def answer_follow_up(query: str, last_answer: str, summary_requested: bool) -> Optional[str]:
    """Build a reply to a follow-up question from the last assistant answer.

    Args:
        query: The follow-up question
        last_answer: Content of the most recent assistant message
        summary_requested: Whether the user asked for a summary and the
            summary should be produced locally

    Returns:
        The reply text, or None when no follow-up rule applies and the query
        should continue through the normal pipeline
    """
    if summary_requested:
        return SUMMARY_PREFIX + summarize_text(last_answer)

    if WHAT_TO_DO_PATTERN.search(query):
        steps_section = STEPS_SECTION_PATTERN.search(last_answer)
        if steps_section:
            steps = extract_numbered_steps(steps_section.group(0))
            if steps:
                return (
                    "Dựa trên câu trả lời trước, đây là các bước bạn cần thực hiện:\n\n"
                    + "\n\n".join(steps)
                    + "\n\nBạn có câu hỏi gì về các bước này không?"
                )

        important_parts = IMPORTANT_PART_PATTERN.findall(last_answer)
        if important_parts:
            return (
                "Dựa trên câu trả lời trước, tóm tắt những điều bạn cần làm:\n\n"
                + "\n\n".join(important_parts[:MAX_IMPORTANT_PARTS])
                + "\n\nBạn có muốn tôi giải thích thêm phần nào không?"
            )

    if RECAP_PATTERN.search(query):
        recap = "\n\n".join(last_answer.split("\n\n")[:MAX_RECAP_PARAGRAPHS])
        return (
            "Dựa trên câu trả lời trước, tóm tắt lại:\n\n"
            + recap
            + "\n\nBạn có muốn tôi giải thích thêm phần nào không?"
        )

    if NEXT_STEPS_PATTERN.search(query):
        steps = extract_numbered_steps(last_answer)
        if steps:
            return (
                "Dựa trên câu trả lời trước, các bước bạn cần thực hiện:\n\n"
                + "\n\n".join(steps)
                + "\n\nBạn có câu hỏi gì về các bước này không?"
            )

    return None
