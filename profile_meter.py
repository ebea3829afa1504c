"""Profile completeness meter.

Scores how filled-in a job seeker's profile is on a 0-100 scale. Each entry in
``PROFILE_POINTS``/``RELATION_POINTS`` awards its points only when its guard
holds; the two tables together sum to exactly 100.
"""
from typing import Any, Optional

# (profile attribute, points) - awarded when the attribute is non-blank
PROFILE_POINTS = (
    ("full_name", 10),
    ("phone", 5),
    ("address", 5),
    ("experience_level", 5),
    ("profile_photo_file_name", 10),
    ("resume_file_name", 10),
    ("summary", 10),
)

# Email only counts once verified
VERIFIED_EMAIL_POINTS = 5

# (relation, points) - awarded when the relation has at least one record
RELATION_POINTS = (
    ("skills", 8),
    ("experiences", 8),
    ("educations", 8),
    ("languages", 8),
    ("licenses", 8),
)

MIN_SCORE = 0
MAX_SCORE = 100


def _is_non_blank(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _has_records(count: Optional[int]) -> bool:
    return (count or 0) > 0


def compute(
    profile: Any,
    skill_count: Optional[int] = 0,
    experience_count: Optional[int] = 0,
    education_count: Optional[int] = 0,
    language_count: Optional[int] = 0,
    license_count: Optional[int] = 0,
) -> int:
    """Return the completeness score for ``profile`` and its relation counts.

    ``profile`` can be an ORM ``JobSeeker``, a ``schemas.ProfileSnapshot`` or
    ``None`` (scored as an empty profile). Missing attributes count as blank.
    """
    score = 0

    def add(ok: bool, points: int) -> None:
        nonlocal score
        if ok:
            score += points

    for attr, points in PROFILE_POINTS:
        add(_is_non_blank(getattr(profile, attr, None)), points)

    add(
        _is_non_blank(getattr(profile, "email", None))
        and bool(getattr(profile, "is_email_verified", False)),
        VERIFIED_EMAIL_POINTS,
    )

    counts = (skill_count, experience_count, education_count, language_count, license_count)
    for (_, points), count in zip(RELATION_POINTS, counts):
        add(_has_records(count), points)

    return max(MIN_SCORE, min(MAX_SCORE, score))
