"""Validation and reconciliation of an application's screening-question answers.

Answers arrive one per question position, in the order of the job's question
set. ``reconcile`` validates all of them, then merges them into the stored
responses for the application: a question that already has a response is
updated in place, any other question gets a new response with a freshly
allocated id. Matching is by question id, so re-submitting the same answers
never creates duplicate rows.

Nothing here touches the database; persistence lives in ``logic``.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import structlog

from id_allocator import InMemoryIdAllocator
from schemas import QuestionResponseDraft

logger = structlog.get_logger(__name__)

RESPONSE_ID_PREFIX = "QRS"
RESPONSE_ID_WIDTH = 7

REQUIRED_MESSAGE = "This field is required"
MAX_LENGTH_MESSAGE = "Maximum {max_length} characters"

ExistingResponses = Union[Mapping[str, Any], Iterable[Any], None]


@dataclass
class ReconcileResult:
    # Created and updated responses, in question order
    responses: List[Any] = field(default_factory=list)
    created: List[QuestionResponseDraft] = field(default_factory=list)
    updated: List[Any] = field(default_factory=list)
    errors: Dict[int, List[str]] = field(default_factory=dict)
    answers: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def normalize_answer(answer: Optional[Any]) -> str:
    """Trim surrounding whitespace; absent answers become empty text."""
    if answer is None:
        return ""
    return str(answer).strip()


def trim_answers(questions: Sequence[Any], submitted_answers: Optional[Sequence[Any]]) -> List[str]:
    """One trimmed answer per question position; missing positions are ``""``."""
    submitted = list(submitted_answers or [])
    return [
        normalize_answer(submitted[i] if i < len(submitted) else None)
        for i in range(len(questions))
    ]


def validate_answers(
    ordered_questions: Optional[Sequence[Any]],
    submitted_answers: Optional[Sequence[Any]],
) -> Dict[int, List[str]]:
    """Collect every required/max-length error, keyed by question position."""
    questions = list(ordered_questions or [])
    answers = trim_answers(questions, submitted_answers)

    errors: Dict[int, List[str]] = {}
    for position, (question, answer) in enumerate(zip(questions, answers)):
        messages = []
        if getattr(question, "is_required", False) and not answer:
            messages.append(REQUIRED_MESSAGE)

        max_length = getattr(question, "max_length", None)
        if max_length is not None and len(answer) > max_length:
            messages.append(MAX_LENGTH_MESSAGE.format(max_length=max_length))

        if messages:
            errors[position] = messages
    return errors


def _index_by_question(existing_responses: ExistingResponses) -> Dict[str, Any]:
    if existing_responses is None:
        return {}
    if isinstance(existing_responses, Mapping):
        return dict(existing_responses)
    return {response.question_id: response for response in existing_responses}


def reconcile(
    ordered_questions: Optional[Sequence[Any]],
    existing_responses: ExistingResponses,
    submitted_answers: Optional[Sequence[Any]],
    allocate_id: Optional[Callable[[], str]] = None,
) -> ReconcileResult:
    """Merge submitted answers into the existing responses for one application.

    On any validation error the result only carries ``errors`` (and the
    trimmed answers); the existing responses are left untouched.

    ``allocate_id`` is called once per new response. It defaults to an
    in-memory allocator seeded with the existing response ids, which is only
    suitable when nothing else allocates concurrently.
    """
    questions = list(ordered_questions or [])
    answers = trim_answers(questions, submitted_answers)

    errors = validate_answers(questions, answers)
    if errors:
        logger.info("Answer validation failed", error_count=len(errors), question_count=len(questions))
        return ReconcileResult(errors=errors, answers=answers)

    by_question = _index_by_question(existing_responses)
    if allocate_id is None:
        allocate_id = InMemoryIdAllocator(
            (getattr(r, "id", None) for r in by_question.values()),
            RESPONSE_ID_PREFIX,
            RESPONSE_ID_WIDTH,
        )

    result = ReconcileResult(answers=answers)
    for question, answer in zip(questions, answers):
        existing = by_question.get(question.id)
        if existing is not None:
            existing.answer = answer
            result.updated.append(existing)
            result.responses.append(existing)
            continue

        draft = QuestionResponseDraft(id=allocate_id(), question_id=question.id, answer=answer)
        # A question listed twice still gets a single response
        by_question[question.id] = draft
        result.created.append(draft)
        result.responses.append(draft)

    logger.debug(
        "Reconciled answers",
        created=len(result.created),
        updated=len(result.updated),
    )
    return result


def answer_completeness_rate(question_count: int, answers: Iterable[Optional[str]]) -> float:
    """Percentage of questions that have a non-blank answer; 0.0 without questions."""
    if not question_count or question_count <= 0:
        return 0.0
    answered = sum(1 for answer in answers if normalize_answer(answer))
    return min(answered, question_count) / question_count * 100
