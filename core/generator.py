import json
import re
from datetime import date
from typing import List

from templates.article_prompt import (
    FORMAT_INSTRUCTIONS,
    NO_EXISTING_TITLES,
    NO_RESEARCH_INSTRUCTION,
    RESEARCH_INSTRUCTION,
    SYSTEM_PROMPT,
    USER_PROMPT,
)
from utils.file_handler import load_schema
from .errors import NoContentError
from .logger import log_event

SCHEMA_NAME = "article_structoutput"

LEADING_FENCE = re.compile(r"^\s*```[a-zA-Z]*[ \t]*\n?")
TRAILING_FENCE = re.compile(r"\n?[ \t]*```\s*$")


def format_display_date(day: date) -> str:
    """October 18, 2026"""
    return f"{day:%B} {day.day}, {day.year}"


def build_system_prompt(existing_titles: List[str], today: date, site_name: str, max_titles: int = 20) -> str:
    titles = [t for t in existing_titles if t][:max_titles]
    listing = "\n".join(f"- {t}" for t in titles) if titles else NO_EXISTING_TITLES
    return SYSTEM_PROMPT.format(
        site_name=site_name,
        existing_titles=listing,
        current_date=format_display_date(today)
    )


def build_user_prompt(categories: List[str], web_search: bool = True, schema: dict = None) -> str:
    schema = schema or load_schema(SCHEMA_NAME)
    prompt_text = USER_PROMPT.format(
        research_instruction=RESEARCH_INSTRUCTION if web_search else NO_RESEARCH_INSTRUCTION,
        categories=", ".join(categories)
    )
    format_instructions = FORMAT_INSTRUCTIONS.format(
        example=json.dumps(schema["example"], indent=4, ensure_ascii=False)
    )
    return f"{prompt_text}\n\n{format_instructions}"


def strip_code_fences(text: str) -> str:
    """Drop a leading ```json / ``` marker and a trailing ``` marker."""
    text = LEADING_FENCE.sub("", text, count=1)
    text = TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def extract_text(response: dict) -> str:
    """
    Join every text segment of a Messages API response, in order, and strip
    code fences. Tool-use and search-result segments are ignored.
    """
    blocks = [
        block.get("text") or ""
        for block in response.get("content") or []
        if isinstance(block, dict) and block.get("type") == "text"
    ]
    blocks = [text for text in blocks if text.strip()]
    if not blocks:
        raise NoContentError("No text content received from the completion service")
    return strip_code_fences("\n".join(blocks))


def generate_article_text(client, config: dict, existing_titles: List[str], today: date) -> str:
    """
    Build the prompts, call the completion service once and return the
    extracted payload text.
    """
    system_prompt = build_system_prompt(
        existing_titles,
        today,
        config["site_name"],
        config["max_existing_titles"]
    )
    user_prompt = build_user_prompt(config["categories"], config["web_search"])

    log_event("INFO", "Calling completion service", {
        "model": config["model"],
        "max_tokens": config["max_tokens"],
        "existing_titles": min(len(existing_titles), config["max_existing_titles"]),
        "web_search": config["web_search"],
    })
    response = client.create_message(
        model=config["model"],
        max_tokens=config["max_tokens"],
        system=system_prompt,
        messages=[{"role": "user", "content": user_prompt}],
        web_search=config["web_search"]
    )

    if response.get("stop_reason") == "max_tokens":
        log_event("WARNING", "Completion stopped at the token limit; payload may be truncated")

    text = extract_text(response)
    log_event("INFO", f"Received {len(text)} characters of article payload")
    return text
