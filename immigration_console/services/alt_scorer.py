"""Alt Scorer: turns profile signals into an alt-account verdict.

Each signal contributes independently; a failed signal contributes nothing.
A subject whose every signal failed therefore scores 0 and reads as
"Not an Alt".
"""

from ..models import AltScore, AltVerdict, SignalSet

# Verdict bands on the total score
POSSIBLY_ALT_MIN_SCORE = 3
DEFINITELY_ALT_MIN_SCORE = 6


def account_age_points(age_days: int | None) -> int:
    if age_days is None:
        return 0
    if age_days < 7:
        return 5
    if age_days < 30:
        return 3
    if age_days < 90:
        return 1
    return 0


def friend_points(friend_count: int | None) -> int:
    if friend_count is None:
        return 0
    if friend_count == 0:
        return 3
    if friend_count <= 3:
        return 1
    return 0


def favorite_points(favorite_count: int | None) -> int:
    return 1 if favorite_count == 0 else 0


def badge_points(badge_count: int | None) -> int:
    return 1 if badge_count == 0 else 0


def group_points(group_count: int | None) -> int:
    if group_count is None:
        return 0
    return 1 if group_count < 3 else 0


def verdict_for(total: int) -> AltVerdict:
    """Map a total score onto its verdict band."""
    if total >= DEFINITELY_ALT_MIN_SCORE:
        return AltVerdict.DEFINITELY_ALT
    if total >= POSSIBLY_ALT_MIN_SCORE:
        return AltVerdict.POSSIBLY_ALT
    return AltVerdict.NOT_AN_ALT


def score(signals: SignalSet) -> AltScore:
    """Score a subject's signals. Pure and deterministic."""
    total = (
        account_age_points(signals.account_age_days)
        + friend_points(signals.friend_count)
        + favorite_points(signals.favorite_count)
        + badge_points(signals.badge_count)
        + group_points(signals.group_count)
    )
    return AltScore(total=total, verdict=verdict_for(total))
