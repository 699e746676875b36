"""
Text heuristics for query understanding.

Tokenization, stop-word filtering, person-name pair detection and the
small regex vocabulary the classifier and strategies share.

Dependencies: re (stdlib)
System role: Keyword heuristics for classification and metadata search
"""

import re

# Dropped before metadata lookups
STOP_WORDS = frozenset({
    "the", "and", "how", "many", "what", "who", "where", "when", "why", "which",
    "are", "is", "was", "were", "at", "in", "on", "for", "to", "of", "from",
    "give", "show", "find", "get", "tell", "about", "me", "you", "your", "have",
    "has", "with", "that", "this", "these", "those", "can", "could", "would",
    "should", "please", "any", "some", "all", "every", "list", "book", "books",
    "document", "documents", "video", "videos", "does", "did", "there", "their",
    "them", "they", "it", "its", "more", "next", "another", "search", "looking",
    "recommend", "suggest", "explain", "know", "into", "want", "need", "like",
    "read", "reading", "good", "best", "top", "regarding", "by", "an", "a",
})

# Tokens that never start or end a candidate person name
NAME_STOP_WORDS = frozenset({
    "the", "and", "from", "by", "of", "book", "books", "article", "articles",
    "document", "documents", "recommendation", "recommendations", "video",
    "videos", "about", "written", "author", "authors", "what", "who", "tell",
    "show", "find", "give", "some", "any", "more", "other", "similar",
})

QUESTION_WORDS = frozenset({
    "what", "who", "where", "when", "why", "how", "which", "is", "are", "do",
    "does", "did", "has", "have", "can", "could", "should", "would", "tell",
    "explain", "define", "describe", "summarize", "the", "a", "an", "i",
    "show", "find", "give", "list", "name",
})

_TOKEN_RE = re.compile(r"[a-z0-9][a-z0-9'\-]*")
_WORD_RE = re.compile(r"[A-Za-z][A-Za-z'\-]*")
_CAPITALISED_RE = re.compile(r"[A-Z][a-zA-Z'\-]+")
_POSSESSIVE_RE = re.compile(r"['’]s$")
_SPAN_BREAK = ".,;:!?)\"'"

PRONOUN_RE = re.compile(
    r"\b(it|that|this|they|them|those|these|he|she|him|his|her|their)\b",
    re.IGNORECASE,
)

_GREETING_RE = re.compile(
    r"^(hi|hello|hey|hiya|howdy|greetings|yo|thanks|thank\s+you|thank\s+you\s+so\s+much|thx|cheers|"
    r"good\s+(morning|afternoon|evening|night)|how\s+are\s+you( doing)?|"
    r"bye|goodbye|see\s+you|ok|okay|cool|great|nice)"
    r"(\s+(there|everyone|all|again|very\s+much))?$",
    re.IGNORECASE,
)


def normalize_text(text: str) -> str:
    """Collapse whitespace and strip surrounding punctuation."""
    return " ".join(text.split()).strip(" \t\n.,!?;:")


def tokenize(text: str) -> list[str]:
    """Lowercase word tokens in order of appearance."""
    return _TOKEN_RE.findall(text.lower())


def search_terms(text: str, max_terms: int = 8) -> list[str]:
    """
    Content tokens for metadata lookups.

    Drops stop-words and tokens of length <= 2, keeps first-seen order
    and removes duplicates.

    Args:
        text: Query text
        max_terms: Upper bound on returned terms

    Returns:
        list[str]: Lowercase search terms
    """
    terms: list[str] = []
    for token in tokenize(text):
        token = token.strip("'-")
        if len(token) <= 2 or token in STOP_WORDS or token.isdigit():
            continue
        if token not in terms:
            terms.append(token)
    return terms[:max_terms]


def name_pairs(text: str) -> list[str]:
    """
    Adjacent content-token pairs that may be a person's full name.

    "books by warren buffett" -> ["warren buffett"]

    Args:
        text: Query text

    Returns:
        list[str]: Lowercase "first last" candidates, deduplicated
    """
    words = [w.lower().strip("'-") for w in _WORD_RE.findall(text)]
    pairs: list[str] = []
    for first, second in zip(words, words[1:]):
        if len(first) <= 2 or len(second) <= 2:
            continue
        if first in NAME_STOP_WORDS or second in NAME_STOP_WORDS:
            continue
        if first in STOP_WORDS or second in STOP_WORDS:
            continue
        pair = f"{first} {second}"
        if pair not in pairs:
            pairs.append(pair)
    return pairs


def proper_noun_pairs(text: str) -> list[str]:
    """
    Capitalised two-word spans such as "Warren Buffett" or "Good Strategy".

    Every adjacent pair of whitespace-separated tokens is checked, so a
    leading question word ("Explain Warren Buffett's ...") does not hide
    the name after it. Punctuation after the first token breaks the span
    and a trailing possessive is dropped.

    "Did Warren Buffett write books?" -> ["Warren Buffett"]
    """
    tokens = text.split()
    spans: list[str] = []
    for first, second in zip(tokens, tokens[1:]):
        if first[-1] in _SPAN_BREAK:
            continue
        first = first.lstrip("(\"'")
        second = _POSSESSIVE_RE.sub("", second.rstrip(_SPAN_BREAK))
        if not (_CAPITALISED_RE.fullmatch(first) and _CAPITALISED_RE.fullmatch(second)):
            continue
        if first.lower() in QUESTION_WORDS or second.lower() in QUESTION_WORDS:
            continue
        span = f"{first} {second}"
        if span not in spans:
            spans.append(span)
    return spans


def is_greeting(text: str) -> bool:
    """True for greeting-only or small-talk messages."""
    return bool(_GREETING_RE.match(normalize_text(text)))


def has_pronoun(text: str) -> bool:
    return bool(PRONOUN_RE.search(text))


def truncate(text: str, length: int) -> str:
    """Cut text to length characters, marking the cut with an ellipsis."""
    text = text or ""
    if len(text) <= length:
        return text
    return text[:length].rstrip() + "..."
