"""Product description shaping for courier paperwork.

LCS prints the description on the airway bill and rejects long or
decorated text, so titles are stripped of marketing noise, SKU codes,
bracketed asides and symbols before being title-cased and truncated.
"""

import re

from shipping.courier.settings import LcsSettings

BRACKETED = re.compile(r"\[[^\]]*\]|\([^)]*\)|\{[^}]*\}")
MARKETING_WORDS = re.compile(
    r"\b(official|original|brand new|best quality|premium|sale|discount|limited|offer|deal|with warranty)\b",
    re.IGNORECASE | re.ASCII,
)
SKU_LIKE = re.compile(r"\b[A-Z]{2,}[-_]*\d+[A-Z\d-]*\b", re.IGNORECASE | re.ASCII)
EMOJI = re.compile("[\U0001F300-\U0001FAFF\u2600-\u27BF]")
DISALLOWED = re.compile(r"[^A-Za-z0-9&+,.\-\s]")
PUNCTUATION_RUN = re.compile(r"[\s.,-]{2,}")
WHITESPACE = re.compile(r"\s+")
WORD = re.compile(r"\w\S*")

VARIANT_SEPARATOR = " · "
MAX_VARIANT_VALUES = 2


def _clean_once(value: str) -> str:
    value = BRACKETED.sub(" ", value)
    value = MARKETING_WORDS.sub(" ", value)
    value = SKU_LIKE.sub(" ", value)
    # replaced with a space so removal never glues two fragments into a new word
    value = EMOJI.sub(" ", value)
    value = DISALLOWED.sub(" ", value)
    value = PUNCTUATION_RUN.sub(" ", value)
    return WHITESPACE.sub(" ", value).strip()


def sanitize_description(text) -> str:
    """Strip a product title down to courier-safe text. Idempotent.

    Collapsing separators can join two words into a new buzzword
    (``brand,  new``), so passes repeat until the text stops changing.
    Every pass that changes clean text also shortens it.
    """
    value = _clean_once(str(text or ""))
    while True:
        cleaned = _clean_once(value)
        if cleaned == value:
            return value
        value = cleaned


def title_case(text: str) -> str:
    return WORD.sub(lambda match: match.group(0)[:1].upper() + match.group(0)[1:].lower(), text)


def variant_snippet(item) -> str:
    values = item.variant_values[:MAX_VARIANT_VALUES] if item is not None else []
    return f"{VARIANT_SEPARATOR}{'/'.join(values)}" if values else ""


def build_product_description(items, settings: LcsSettings) -> str:
    titles = [str(item.title).strip() for item in items if item.title and str(item.title).strip()]
    raw = titles[0] if titles else (settings.default_product.strip() or "Item")

    combined = sanitize_description(raw)
    if settings.product_include_variants and items:
        combined += variant_snippet(items[0])

    return title_case(combined.strip())[: settings.description_max_len].strip()
