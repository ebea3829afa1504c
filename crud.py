from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

import id_allocator
import models
import schemas


# --- Job Seeker CRUD ---
def get_job_seeker(db: Session, job_seeker_id: str):
    """Get a job seeker by their primary key ID."""
    return db.query(models.JobSeeker).filter(models.JobSeeker.id == job_seeker_id).first()


_RELATION_MODELS = {
    "skill_count": models.JobSeekerSkill,
    "experience_count": models.WorkExperience,
    "education_count": models.Education,
    "language_count": models.Language,
    "license_count": models.License,
}


def count_profile_relations(db: Session, job_seeker_id: str) -> Dict[str, int]:
    """Counts of the job seeker's owned records, keyed like ``profile_meter.compute``'s arguments."""
    counts = {}
    for key, model in _RELATION_MODELS.items():
        counts[key] = (
            db.query(func.count(model.id))
            .filter(model.job_seeker_id == job_seeker_id)
            .scalar()
            or 0
        )
    return counts


# --- Job / Question CRUD ---
def get_job(db: Session, job_id: str):
    return db.query(models.Job).filter(models.Job.id == job_id).first()


def get_questions_for_job(db: Session, job: models.Job) -> List[models.Question]:
    """Questions for a job ordered by ``order``.

    A job with an assigned question set only has questions while that set is
    active; a job without a set falls back to its own job-level questions.
    """
    if job is None:
        return []

    if job.question_set_id:
        question_set = (
            db.query(models.QuestionSet)
            .filter(models.QuestionSet.id == job.question_set_id)
            .first()
        )
        if not question_set or not question_set.is_active:
            return []
        query = db.query(models.Question).filter(models.Question.question_set_id == question_set.id)
    else:
        query = db.query(models.Question).filter(models.Question.job_id == job.id)

    return query.order_by(models.Question.order, models.Question.id).all()


# --- Application CRUD ---
def get_application(db: Session, application_id: str):
    return db.query(models.Application).filter(models.Application.id == application_id).first()


def get_application_for_seeker(db: Session, application_id: str, job_seeker_id: str):
    return (
        db.query(models.Application)
        .filter(
            models.Application.id == application_id,
            models.Application.job_seeker_id == job_seeker_id,
        )
        .first()
    )


def has_applied(db: Session, job_id: str, job_seeker_id: str) -> bool:
    return (
        db.query(models.Application.id)
        .filter(
            models.Application.job_id == job_id,
            models.Application.job_seeker_id == job_seeker_id,
        )
        .first()
        is not None
    )


def create_application(
    db: Session,
    application_id: str,
    job_id: str,
    job_seeker_id: str,
    cover_letter: Optional[str] = None,
):
    db_application = models.Application(
        id=application_id,
        job_id=job_id,
        job_seeker_id=job_seeker_id,
        cover_letter=(cover_letter or "").strip(),
        status=models.ApplicationStatus.PENDING,
    )
    db.add(db_application)
    db.flush()
    return db_application


# --- Question Response CRUD ---
def get_responses_for_application(db: Session, application_id: str) -> Dict[str, models.QuestionResponse]:
    """Stored responses for one application, keyed by question id."""
    rows = (
        db.query(models.QuestionResponse)
        .filter(models.QuestionResponse.application_id == application_id)
        .all()
    )
    return {row.question_id: row for row in rows}


def add_responses(
    db: Session,
    drafts: Iterable[schemas.QuestionResponseDraft],
    application: models.Application,
) -> List[models.QuestionResponse]:
    """Insert new responses for ``application`` in one flush."""
    rows = [
        models.QuestionResponse(
            id=draft.id,
            question_id=draft.question_id,
            application_id=application.id,
            job_seeker_id=application.job_seeker_id,
            answer=draft.answer or "",
        )
        for draft in drafts
    ]
    db.add_all(rows)
    db.flush()
    return rows


# --- Id Sequences ---
def _scan_max_sequence(db: Session, id_column, prefix: str, width: int) -> int:
    existing = [row[0] for row in db.query(id_column).filter(id_column.startswith(prefix))]
    return id_allocator.max_sequence(existing, prefix, width)


def reserve_ids(
    db: Session,
    id_column,
    prefix: str,
    width: int,
    count: int,
    resync: bool = False,
) -> List[str]:
    """Reserve ``count`` consecutive ids for ``prefix`` inside the caller's transaction.

    The counter is incremented before it is read, so the UPDATE's row lock
    is held before any transaction sees the new value and two writers can
    never read the same one. The first reservation for a prefix seeds the
    counter from the ids already in ``id_column``; ``resync`` re-runs that
    scan, for retries after a unique-constraint conflict with rows written
    outside the counter.
    """
    if count <= 0:
        return []

    counter = db.query(models.IdSequence).filter(models.IdSequence.prefix == prefix)
    bumped = counter.update({models.IdSequence.last_value: models.IdSequence.last_value + count})

    if bumped:
        end = db.query(models.IdSequence.last_value).filter(models.IdSequence.prefix == prefix).scalar()
        if resync:
            floor = _scan_max_sequence(db, id_column, prefix, width)
            if end - count < floor:
                end = floor + count
                counter.update({models.IdSequence.last_value: end})
    else:
        end = _scan_max_sequence(db, id_column, prefix, width) + count
        db.add(models.IdSequence(prefix=prefix, last_value=end))
        db.flush()  # A concurrent first use fails here on the primary key

    start = end - count
    return [id_allocator.format_id(prefix, start + offset, width) for offset in range(1, count + 1)]
