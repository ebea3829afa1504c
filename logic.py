"""Service operations over the store: profile completeness and application answers.

Each write operation owns exactly one transaction: it commits once when
everything succeeded and rolls back otherwise, so a batch of answers is
either stored completely or not at all. Id/unique-constraint conflicts
(another writer got there first) are rolled back and retried.
"""
from typing import Any, List, Optional, Sequence, Tuple

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from structlog.contextvars import bound_contextvars

import answers as answer_rules
import crud
import models
import profile_meter
import schemas
from settings import get_settings

logger = structlog.get_logger(__name__)


class NotFoundError(LookupError):
    """The requested job, job seeker or application does not exist (for this caller)."""


class AlreadyAppliedError(ValueError):
    """The job seeker already has an application for this job."""


# --- Profile completeness ---
def get_profile_completeness(db: Session, job_seeker_id: str) -> int:
    job_seeker = crud.get_job_seeker(db, job_seeker_id)
    if job_seeker is None:
        logger.info("Profile completeness requested for unknown job seeker", job_seeker_id=job_seeker_id)
        return 0

    counts = crud.count_profile_relations(db, job_seeker_id)
    score = profile_meter.compute(schemas.ProfileSnapshot.model_validate(job_seeker), **counts)
    logger.debug("Computed profile completeness", job_seeker_id=job_seeker_id, score=score)
    return score


# --- Application answers ---
def _load_application(db: Session, application_id: str, job_seeker_id: Optional[str]) -> models.Application:
    if job_seeker_id is not None:
        application = crud.get_application_for_seeker(db, application_id, job_seeker_id)
    else:
        application = crud.get_application(db, application_id)
    if application is None:
        raise NotFoundError(f"Application {application_id} not found")
    return application


def _active_question_set_name(job: Optional[models.Job]) -> Optional[str]:
    if job is None or job.question_set is None or not job.question_set.is_active:
        return None
    return job.question_set.name


def load_application_form(
    db: Session, application_id: str, job_seeker_id: Optional[str] = None
) -> schemas.ApplicationForm:
    """The application's ordered questions with any stored answers filled in."""
    application = _load_application(db, application_id, job_seeker_id)
    questions = crud.get_questions_for_job(db, application.job)
    existing = crud.get_responses_for_application(db, application.id)

    views = []
    for question in questions:
        spec = schemas.QuestionSpec.model_validate(question)
        stored = existing.get(question.id)
        views.append(
            schemas.QuestionAnswerView(
                question_id=spec.id,
                question_text=spec.text,
                type=spec.type,
                is_required=spec.is_required,
                options=spec.option_list,
                max_length=spec.max_length,
                answer=stored.answer if stored is not None else None,
            )
        )

    return schemas.ApplicationForm(
        application_id=application.id,
        job_id=application.job_id,
        job_title=application.job.title if application.job else None,
        cover_letter=application.cover_letter,
        status=application.status,
        question_set_name=_active_question_set_name(application.job),
        questions=views,
        completeness_rate=answer_rules.answer_completeness_rate(
            len(views), (view.answer for view in views)
        ),
    )


def _stored(db: Session, rows: Sequence[models.QuestionResponse]) -> List[schemas.StoredResponse]:
    """Snapshot flushed rows, server-generated ``responded_at`` included, before commit."""
    for row in rows:
        db.refresh(row)
    return [schemas.StoredResponse.model_validate(row) for row in rows]


def _save_answers_once(
    db: Session,
    application_id: str,
    submitted_answers: Sequence[Any],
    job_seeker_id: Optional[str],
    resync: bool,
) -> Tuple[schemas.ReconcileOutcome, List[models.QuestionResponse]]:
    settings = get_settings()
    application = _load_application(db, application_id, job_seeker_id)
    questions = crud.get_questions_for_job(db, application.job)
    trimmed = answer_rules.trim_answers(questions, submitted_answers)

    errors = answer_rules.validate_answers(questions, trimmed)
    if errors:
        outcome = schemas.ReconcileOutcome(
            application_id=application.id, success=False, errors=errors, answers=trimmed
        )
        return outcome, []

    existing = crud.get_responses_for_application(db, application.id)
    missing = sum(1 for question in {q.id for q in questions} if question not in existing)
    new_ids = iter(
        crud.reserve_ids(
            db,
            models.QuestionResponse.id,
            settings.response_id_prefix,
            settings.id_width,
            missing,
            resync=resync,
        )
    )

    result = answer_rules.reconcile(questions, existing, trimmed, allocate_id=lambda: next(new_ids))
    created_rows = crud.add_responses(db, result.created, application)
    rows_by_id = {row.id: row for row in created_rows}
    ordered_rows = [rows_by_id.get(response.id, response) for response in result.responses]
    db.flush()

    outcome = schemas.ReconcileOutcome(
        application_id=application.id,
        success=True,
        created_ids=[draft.id for draft in result.created],
        answers=trimmed,
    )
    return outcome, ordered_rows


def save_application_answers(
    db: Session,
    application_id: str,
    submitted_answers: Sequence[Any],
    job_seeker_id: Optional[str] = None,
) -> schemas.ReconcileOutcome:
    """Validate and store one answer per question position for an application.

    On validation errors nothing is written and the outcome carries the
    per-position messages plus the trimmed answers for re-display.
    """
    attempts = max(1, get_settings().id_allocation_retries)

    with bound_contextvars(application_id=application_id):
        for attempt in range(1, attempts + 1):
            try:
                outcome, rows = _save_answers_once(
                    db, application_id, submitted_answers, job_seeker_id, resync=attempt > 1
                )
                if not outcome.success:
                    db.rollback()
                    logger.info("Answers rejected", error_positions=sorted(outcome.errors))
                    return outcome
                outcome.responses = _stored(db, rows)
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                if attempt >= attempts:
                    logger.error("Saving answers failed after retries", attempts=attempts, exc_info=exc)
                    raise
                logger.warning("Conflict while saving answers; retrying", attempt=attempt)
                continue
            except Exception:
                db.rollback()
                raise

            logger.info(
                "Answers saved",
                created=len(outcome.created_ids),
                total=len(outcome.responses),
            )
            return outcome

    raise RuntimeError("unreachable")  # pragma: no cover


# --- Applying ---
def _submit_once(
    db: Session,
    job: models.Job,
    job_seeker_id: str,
    questions: Sequence[models.Question],
    trimmed: Sequence[str],
    cover_letter: Optional[str],
    resync: bool,
) -> Tuple[schemas.ApplicationSubmission, List[models.QuestionResponse]]:
    settings = get_settings()

    if crud.has_applied(db, job.id, job_seeker_id):
        raise AlreadyAppliedError(f"Job seeker {job_seeker_id} already applied to job {job.id}")

    application_id = crud.reserve_ids(
        db,
        models.Application.id,
        settings.application_id_prefix,
        settings.id_width,
        1,
        resync=resync,
    )[0]
    application = crud.create_application(db, application_id, job.id, job_seeker_id, cover_letter)

    # Unanswered optional questions get no row until the answers are edited
    answered = [(question, answer) for question, answer in zip(questions, trimmed) if answer]
    response_ids = crud.reserve_ids(
        db,
        models.QuestionResponse.id,
        settings.response_id_prefix,
        settings.id_width,
        len(answered),
        resync=resync,
    )
    drafts = [
        schemas.QuestionResponseDraft(id=response_id, question_id=question.id, answer=answer)
        for response_id, (question, answer) in zip(response_ids, answered)
    ]
    rows = crud.add_responses(db, drafts, application)

    submission = schemas.ApplicationSubmission(
        success=True,
        application_id=application.id,
        job_id=job.id,
        answers=list(trimmed),
    )
    return submission, rows


def submit_application(
    db: Session,
    job_id: str,
    job_seeker_id: str,
    submitted_answers: Optional[Sequence[Any]] = None,
    cover_letter: Optional[str] = "",
) -> schemas.ApplicationSubmission:
    """Create an application for ``job_id`` with its screening answers in one transaction."""
    job = crud.get_job(db, job_id)
    if job is None:
        db.rollback()
        raise NotFoundError(f"Job {job_id} not found")
    if crud.get_job_seeker(db, job_seeker_id) is None:
        db.rollback()
        raise NotFoundError(f"Job seeker {job_seeker_id} not found")

    questions = crud.get_questions_for_job(db, job)
    trimmed = answer_rules.trim_answers(questions, submitted_answers)
    errors = answer_rules.validate_answers(questions, trimmed)
    if errors:
        db.rollback()
        logger.info("Application rejected", job_id=job_id, error_positions=sorted(errors))
        return schemas.ApplicationSubmission(success=False, job_id=job_id, errors=errors, answers=trimmed)

    attempts = max(1, get_settings().id_allocation_retries)
    for attempt in range(1, attempts + 1):
        try:
            submission, rows = _submit_once(
                db, job, job_seeker_id, questions, trimmed, cover_letter, resync=attempt > 1
            )
            submission.responses = _stored(db, rows)
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if attempt >= attempts:
                logger.error("Submitting application failed after retries", job_id=job_id, exc_info=exc)
                raise
            logger.warning("Conflict while submitting application; retrying", job_id=job_id, attempt=attempt)
            continue
        except Exception:
            db.rollback()
            raise

        logger.info(
            "Application submitted",
            application_id=submission.application_id,
            job_id=job_id,
            job_seeker_id=job_seeker_id,
            responses=len(submission.responses),
        )
        return submission

    raise RuntimeError("unreachable")  # pragma: no cover
