"""Deterministic linter for generic sales copy ("slop").

Each rule adds an independent, explainable penalty; the score is their sum
capped at 100. Lower is better: <20 great, <40 acceptable, else needs work.
"""

import re

from leadintel.models import SlopAnalysis

BANNED_PHRASES = [
    "i hope this finds you well",
    "hope this email finds you",
    "hope you're doing well",
    "i came across your profile",
    "i came across your company",
    "reaching out to you",
    "just reaching out",
    "wanted to reach out",
    "i wanted to introduce",
    "touch base",
    "circle back",
    "pick your brain",
    "loop you in",
    "ping you",
    "leverage",
    "synergy",
    "synergies",
    "low-hanging fruit",
    "move the needle",
    "at the end of the day",
    "deep dive",
    "drill down",
    "bandwidth",
    "paradigm shift",
    "win-win",
    "thought leader",
    "disruptive",
    "game-changer",
    "best-in-class",
    "world-class",
    "cutting-edge",
    "state-of-the-art",
    "next-generation",
    "revolutionary",
    "transform your business",
    "take your business to the next level",
    "i'd love to chat",
    "would love to chat",
    "would love to connect",
    "i'd love to connect",
    "grab a coffee",
    "quick question",
    "just checking in",
    "following up",
    "per my last email",
    "as per our conversation",
    "congratulations on the funding",
    "congratulations on your recent",
    "i noticed you",
    "i saw that you",
]

WEAK_OPENERS = [
    re.compile(r"^(hi|hello|hey|dear)\s+(there|team|sir|madam)", re.IGNORECASE),
    re.compile(r"^my name is", re.IGNORECASE),
    re.compile(r"^i am (a|the|an)\b", re.IGNORECASE),
    re.compile(r"^i work (at|for|with)", re.IGNORECASE),
    re.compile(r"^we are a\b", re.IGNORECASE),
    re.compile(r"^our company", re.IGNORECASE),
]

VAGUE_CTAS = [
    "let me know if you're interested",
    "let me know what you think",
    "would love to hear your thoughts",
    "feel free to reach out",
    "don't hesitate to contact",
    "i'm happy to discuss",
    "let's find a time",
    "when works for you",
]

SPECIFIC_REFERENCES = [
    re.compile(
        r"\b(your|you're|you've)\s+(post|article|comment|tweet|work|project|team|department|recent|latest)",
        re.IGNORECASE,
    ),
    re.compile(r"\b(noticed|saw|read|heard)\s+that\s+you", re.IGNORECASE),
    re.compile(r"\b(regarding|about|concerning)\s+your", re.IGNORECASE),
    re.compile(r"\b(after|following)\s+(seeing|reading|hearing)", re.IGNORECASE),
]

ACRONYM_WHITELIST = {
    "RLTX", "SAAS", "HIPAA", "GDPR", "CJIS", "FEMA", "HTTP", "JSON", "AWS",
    "CRM", "ROI", "API", "CEO", "CTO", "CFO", "CIO", "CISO",
}

_ALL_CAPS = re.compile(r"\b[A-Z]{4,}\b")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_FIRST_LINE_SPLIT = re.compile(r"[.!?\n]")

BANNED_PHRASE_PENALTY = 15
WEAK_OPENER_PENALTY = 20
VAGUE_CTA_PENALTY = 10
LENGTH_PENALTY = 10
NO_SPECIFIC_OPENER_PENALTY = 15
EXCLAMATION_PENALTY = 5
ALL_CAPS_PENALTY = 5
MAX_SENTENCES = 5


def find_banned_phrases(text: str) -> list[str]:
    lower = (text or "").lower()
    return [phrase for phrase in BANNED_PHRASES if phrase in lower]


def analyze_message_for_slop(message: str) -> SlopAnalysis:
    message = message or ""
    lower = message.lower()
    issues: list[str] = []
    improvements: list[str] = []
    points = 0

    for phrase in find_banned_phrases(message):
        issues.append(f'Contains banned phrase: "{phrase}"')
        points += BANNED_PHRASE_PENALTY

    first_line = _FIRST_LINE_SPLIT.split(message, maxsplit=1)[0]
    if any(p.search(first_line) for p in WEAK_OPENERS):
        issues.append("Opens with a weak/generic pattern")
        improvements.append("Start with something specific about them or their situation")
        points += WEAK_OPENER_PENALTY

    for cta in VAGUE_CTAS:
        if cta in lower:
            issues.append(f'Vague call-to-action: "{cta}"')
            improvements.append("Use a specific ask with a clear next step")
            points += VAGUE_CTA_PENALTY

    sentences = [s for s in _SENTENCE_SPLIT.split(message) if len(s.strip()) > 10]
    if len(sentences) > MAX_SENTENCES:
        issues.append(f"Too long: {len(sentences)} sentences (recommend max 4)")
        improvements.append("Cut to 4 sentences or fewer")
        points += LENGTH_PENALTY

    has_specific_reference = any(p.search(first_line) for p in SPECIFIC_REFERENCES)
    if not has_specific_reference and "following up" not in lower:
        issues.append("Opener lacks specific reference to their work/situation")
        improvements.append("Reference a specific signal, quote, or data point about them")
        points += NO_SPECIFIC_OPENER_PENALTY

    exclamations = message.count("!")
    if exclamations > 1:
        issues.append(f"Too many exclamation marks ({exclamations})")
        improvements.append("Use at most one exclamation mark")
        points += EXCLAMATION_PENALTY

    shouting = [w for w in _ALL_CAPS.findall(message) if w not in ACRONYM_WHITELIST]
    if shouting:
        issues.append("Contains ALL CAPS words (feels like shouting)")
        points += ALL_CAPS_PENALTY

    return SlopAnalysis(score=min(100, points), issues=issues, improvements=improvements)
