"""
End-of-session scoring. Five independent rubrics add onto a base score and
each contributes at most one feedback line.
"""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict

from interview_coach.session import SessionSnapshot, round_half_up

BASE_SCORE = 6
MIN_SCORE = 1
MAX_SCORE = 10

FILLER_WORDS = ("um", "uh", "like", "you know", "basically", "actually", "literally")
ACTION_VERBS = (
    "achieved",
    "led",
    "managed",
    "created",
    "delivered",
    "improved",
    "increased",
    "reduced",
    "solved",
    "implemented",
)

IDEAL_WPM = (120, 150)
SLOW_WPM = 80
FAST_WPM = 180
MIN_WORDS = 50
MAX_WORDS = 500


def _compile_lexicon(words: Tuple[str, ...]) -> List[re.Pattern[str]]:
    # ASCII word boundaries: accented letters do not glue onto a lexicon word.
    return [re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE | re.ASCII) for word in words]


FILLER_PATTERNS = _compile_lexicon(FILLER_WORDS)
ACTION_VERB_PATTERNS = _compile_lexicon(ACTION_VERBS)


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int
    suggestions: List[str]
    metrics: Dict[str, int]
    summary: Dict[str, str]


def count_matches(text: str, patterns: List[re.Pattern[str]]) -> int:
    return sum(len(pattern.findall(text)) for pattern in patterns)


def count_words(text: str) -> int:
    # Whitespace-only input is zero words, not one empty token.
    return len(text.split())


def clamp_score(raw: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, raw))


def _dedupe(items: List[str]) -> List[str]:
    seen: set[str] = set()
    deduped: List[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        deduped.append(item)
    return deduped


def analyze(transcript: str, duration: float, avg_gaze_score: int, face_detection_count: int) -> AnalysisResult:
    if duration <= 0:
        raise ValueError(f"Session duration must be positive, got {duration}")

    score = BASE_SCORE
    suggestions: List[str] = []

    fillers = count_matches(transcript, FILLER_PATTERNS)
    if fillers == 0:
        score += 2
        suggestions.append("✅ Excellent! No filler words detected")
    elif fillers <= 2:
        score += 1
        suggestions.append(f"⚠️ Reduce filler words (found {fillers})")
    else:
        suggestions.append(f"❌ Too many filler words ({fillers} found) - Speak with confidence")

    word_count = count_words(transcript)
    wpm = round_half_up(word_count / (duration / 60))
    if IDEAL_WPM[0] <= wpm <= IDEAL_WPM[1]:
        score += 1
        suggestions.append(f"✅ Perfect pace: {wpm} words/min (120-150 is ideal)")
    elif wpm < SLOW_WPM:
        suggestions.append(f"⚠️ Speaking too slowly ({wpm} wpm) - Pick up the pace")
    elif wpm > FAST_WPM:
        suggestions.append(f"⚠️ Speaking too fast ({wpm} wpm) - Slow down for clarity")

    if avg_gaze_score >= 80:
        score += 2
        suggestions.append("✅ Excellent eye contact maintained")
    elif avg_gaze_score >= 60:
        score += 1
        suggestions.append(f"⚠️ Maintain more eye contact ({avg_gaze_score}% detected)")
    else:
        suggestions.append(f"❌ Poor eye contact ({avg_gaze_score}%) - Look at the camera")

    if word_count < MIN_WORDS:
        suggestions.append("⚠️ Response too short - Provide more details")
    elif word_count > MAX_WORDS:
        suggestions.append("⚠️ Response too long - Be more concise")
    else:
        score += 1
        suggestions.append("✅ Good response length")

    action_verbs = count_matches(transcript, ACTION_VERB_PATTERNS)
    if action_verbs >= 3:
        score += 2
        suggestions.append(f"✅ Great use of action verbs ({action_verbs} found)")
    elif action_verbs > 0:
        score += 1
        suggestions.append(f"⚠️ Use more action verbs ({action_verbs} found - aim for 3+)")
    else:
        suggestions.append("❌ Include action verbs (achieved, led, managed, etc.)")

    return AnalysisResult(
        score=clamp_score(score),
        suggestions=_dedupe(suggestions),
        metrics={
            "fillerWordCount": fillers,
            "wordsPerMinute": wpm,
            "totalWords": word_count,
            "avgGazeScore": avg_gaze_score,
            "actionVerbCount": action_verbs,
            "faceDetectionCount": face_detection_count,
        },
        summary={
            "summary": f"{word_count} words in {duration:.1f}s at {wpm}wpm",
            "eyeContact": f"{avg_gaze_score}% contact maintained",
            "fillerWords": f"{fillers} filler words detected",
        },
    )


def analyze_snapshot(snapshot: SessionSnapshot) -> AnalysisResult:
    return analyze(
        snapshot.transcript,
        snapshot.duration,
        snapshot.avg_gaze_score,
        snapshot.face_detection_count,
    )
