"""
PromptShelf Backend — Prompt Analysis
======================================

What:  Token estimate and a heuristic confidence score for a prompt.
How:   Pure functions. The score adds up points for length, structure,
       specificity, examples, role, chain-of-thought cues and an
       EmotionPrompt bonus (https://arxiv.org/abs/2307.11760).
Who:   POST /api/prompts/analyze.
"""

import math
import re
from typing import List, Optional, Tuple

from app.schemas.prompt import AnalyzeResponse, ConfidenceFactor, ConfidenceReport

ACTION_VERBS = [
    "explain", "describe", "analyze", "create", "write", "generate", "list", "compare",
    "summarize", "translate", "convert", "review", "evaluate", "suggest", "provide",
    "identify", "implement", "design", "develop", "build",
]

# (pattern, points, detail); matched against the lowercased prompt
EMOTION_STIMULI: List[Tuple[re.Pattern, int, str]] = [
    (re.compile(r"important to my|crucial for my|critical to my|essential for my"), 5, "Importance stated"),
    (re.compile(r"my career|my job|my work|my success|my future"), 3, "Personal stakes"),
    (re.compile(r"you('d| would) better|you must|you need to|make sure"), 3, "Urgency"),
    (re.compile(r"are you sure|are you certain|double.?check"), 2, "Verification request"),
    (re.compile(r"believe in (you|your)|have confidence|trust (you|your)"), 3, "Confidence boost"),
    (re.compile(r"do your best|give it your all|take a deep breath|stay calm"), 3, "Encouragement"),
    (re.compile(r"this is (very )?important|this matters|this is critical"), 4, "Emphasis"),
    (re.compile(r"take pride|be proud|embrace.*challenge"), 2, "Pride/challenge"),
]
EMOTION_CAP = 15

# (minimum score, level, label), checked top-down
LEVELS = [(70, "high", "High"), (45, "good", "Good"), (25, "medium", "Med")]


def estimate_tokens(text: Optional[str]) -> int:
    """Rough token count: one token per four characters, rounded up."""
    if not text or not text.strip():
        return 0
    return math.ceil(len(text) / 4)


def _length_factor(token_count: int) -> ConfidenceFactor:
    if 20 <= token_count <= 50:
        points, desc = 10, "Short but adequate"
    elif 50 < token_count <= 150:
        points, desc = 18, "Good length"
    elif 150 < token_count <= 500:
        points, desc = 20, "Optimal length"
    elif 500 < token_count <= 1000:
        points, desc = 15, "Detailed"
    elif token_count > 1000:
        points, desc = 10, "Very long"
    elif token_count > 10:
        points, desc = 5, "Too brief"
    else:
        points, desc = 0, "Too short"
    return ConfidenceFactor(
        name="Length", points=points, max=20, detail=f"{token_count} tokens - {desc}",
    )


def _structure_factor(content: str) -> ConfidenceFactor:
    points = 0
    details = []
    if re.search(r"\d+\.\s", content):
        points += 8
        details.append("Numbered list")
    if re.search(r"[-•]\s", content):
        points += 5
        details.append("Bullet points")
    if "\n\n" in content:
        points += 5
        details.append("Clear sections")
    if re.search(r"#{1,3}\s", content):
        points += 2
        details.append("Headers")
    return ConfidenceFactor(
        name="Structure",
        points=points,
        max=20,
        detail=", ".join(details) if details else "No structure found",
    )


def _specificity_factor(text: str) -> ConfidenceFactor:
    found = [verb for verb in ACTION_VERBS if verb in text]
    points = min(len(found) * 3, 15)
    details = []
    if found:
        more = "..." if len(found) > 3 else ""
        details.append(f"Action verbs: {', '.join(found[:3])}{more}")
    if re.search(r"format|json|xml|markdown|table|list", text):
        points += 5
        details.append("Output format specified")
    if re.search(r"must|should|always|never|only|exactly", text):
        points += 5
        details.append("Has constraints")
    return ConfidenceFactor(
        name="Specificity",
        points=points,
        max=25,
        detail=", ".join(details) if details else "Could be more specific",
    )


def _examples_factor(text: str) -> ConfidenceFactor:
    points = 0
    details = []
    if re.search(r"example\s*\d*\s*:", text):
        points += 10
        details.append("Has examples")
    if re.search(r"input:|output:", text):
        points += 5
        details.append("I/O patterns")
    return ConfidenceFactor(
        name="Examples",
        points=points,
        max=15,
        detail=", ".join(details) if details else "No examples (few-shot)",
    )


def _role_factor(text: str) -> ConfidenceFactor:
    found = re.search(r"you are|act as|pretend|role|expert|specialist|professional", text)
    return ConfidenceFactor(
        name="Role/Persona",
        points=10 if found else 0,
        max=10,
        detail="Role defined" if found else "No role assigned",
    )


def _reasoning_factor(text: str) -> ConfidenceFactor:
    found = re.search(
        r"step by step|think through|reasoning|let's think|show your work|explain your", text
    )
    return ConfidenceFactor(
        name="Chain of Thought",
        points=10 if found else 0,
        max=10,
        detail="CoT prompting detected" if found else "No reasoning guidance",
    )


def analyze_prompt_confidence(content: Optional[str], token_count: int) -> ConfidenceReport:
    """
    Scores ``content`` and maps the score to a level.

    Blank content gets level ``none`` and no factors. The EmotionPrompt
    factor is only listed when its raw score reaches 3, but its capped
    points always count toward the total.
    """
    if not content or not content.strip():
        return ConfidenceReport(level="none", score=0, label="Empty")

    text = content.lower()
    factors = [
        _length_factor(token_count),
        _structure_factor(content),
        _specificity_factor(text),
        _examples_factor(text),
        _role_factor(text),
        _reasoning_factor(text),
    ]
    score = sum(factor.points for factor in factors)

    emotion_raw = 0
    emotion_details = []
    for pattern, points, detail in EMOTION_STIMULI:
        if pattern.search(text):
            emotion_raw += points
            emotion_details.append(detail)
    emotion_score = min(emotion_raw, EMOTION_CAP)
    score += emotion_score
    has_emotion = emotion_raw >= 3
    if has_emotion:
        factors.append(ConfidenceFactor(
            name="EmotionPrompt",
            points=emotion_score,
            max=EMOTION_CAP,
            detail=", ".join(emotion_details),
            is_bonus=True,
        ))

    level, label = "low", "Low"
    for minimum, name, name_label in LEVELS:
        if score >= minimum:
            level, label = name, name_label
            break

    return ConfidenceReport(
        level=level,
        score=score,
        label=label,
        factors=factors,
        has_emotion=has_emotion,
        emotion_score=emotion_score,
    )


def analyze_prompt(content: str, token_count: Optional[int] = None) -> AnalyzeResponse:
    """Token estimate plus confidence; ``token_count`` overrides the estimate for scoring."""
    estimated = estimate_tokens(content)
    used = estimated if token_count is None else token_count
    return AnalyzeResponse(
        token_count=used,
        estimated_tokens=estimated,
        confidence=analyze_prompt_confidence(content, used),
    )
