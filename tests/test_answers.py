import pytest

import answers
from schemas import QuestionResponseDraft, QuestionSpec


def make_question(question_id: str, order: int, is_required: bool = False, max_length=None) -> QuestionSpec:
    return QuestionSpec(
        id=question_id,
        text=f"Question {question_id}",
        is_required=is_required,
        max_length=max_length,
        order=order,
    )


QUESTIONS = [
    make_question("QST0000001", 1, is_required=True),
    make_question("QST0000002", 2, max_length=10),
]


# --- Validation ---

def test_required_blank_answer_is_rejected_and_nothing_changes():
    existing = {"QST0000001": QuestionResponseDraft(id="QRS0000001", question_id="QST0000001", answer="old")}

    result = answers.reconcile(QUESTIONS, existing, ["   ", "fine"])

    assert not result.ok
    assert result.errors == {0: ["This field is required"]}
    assert result.responses == []
    assert result.created == []
    assert existing["QST0000001"].answer == "old"


def test_max_length_error_names_the_limit():
    errors = answers.validate_answers(QUESTIONS, ["yes", "x" * 11])
    assert errors == {1: ["Maximum 10 characters"]}


def test_length_is_checked_after_trimming():
    errors = answers.validate_answers(QUESTIONS, ["yes", "   0123456789   "])
    assert errors == {}


def test_all_errors_are_collected():
    errors = answers.validate_answers(QUESTIONS, ["", "much too long for ten"])
    assert errors == {
        0: ["This field is required"],
        1: ["Maximum 10 characters"],
    }


def test_missing_positions_count_as_blank():
    errors = answers.validate_answers(QUESTIONS, [])
    assert errors == {0: ["This field is required"]}


# --- Reconciliation ---

def test_updates_existing_and_creates_missing():
    existing_response = QuestionResponseDraft(id="QRS0000004", question_id="QST0000001", answer="old")
    existing = {"QST0000001": existing_response}

    result = answers.reconcile(QUESTIONS, existing, ["new answer", "short"])

    assert result.ok
    assert existing_response.answer == "new answer"
    assert result.updated == [existing_response]
    assert len(result.created) == 1
    created = result.created[0]
    assert created.question_id == "QST0000002"
    assert created.answer == "short"
    assert created.id == "QRS0000005"
    assert [r.question_id for r in result.responses] == ["QST0000001", "QST0000002"]


def test_resubmitting_identical_answers_creates_nothing():
    existing = {}
    first = answers.reconcile(QUESTIONS, existing, ["a", "b"])
    for draft in first.created:
        existing[draft.question_id] = draft

    second = answers.reconcile(QUESTIONS, existing, ["a", "b"])

    assert len(first.created) == 2
    assert second.created == []
    assert len(second.updated) == 2
    assert len(existing) == 2


def test_answers_are_trimmed_and_never_none():
    result = answers.reconcile(QUESTIONS, {}, ["  hello  ", "   "])

    assert result.ok
    assert [r.answer for r in result.created] == ["hello", ""]


def test_none_answer_for_optional_question_is_stored_as_empty_text():
    result = answers.reconcile(QUESTIONS, {}, ["hello", None])
    assert result.created[1].answer == ""


def test_uses_given_allocator_once_per_new_response():
    issued = iter(["QRS0000100", "QRS0000101"])
    calls = []

    def allocate():
        calls.append(1)
        return next(issued)

    result = answers.reconcile(QUESTIONS, {}, ["a", "b"], allocate_id=allocate)

    assert [r.id for r in result.created] == ["QRS0000100", "QRS0000101"]
    assert len(calls) == 2


def test_existing_responses_may_be_a_list():
    existing = [QuestionResponseDraft(id="QRS0000001", question_id="QST0000002", answer="x")]

    result = answers.reconcile(QUESTIONS, existing, ["a", "b"])

    assert existing[0].answer == "b"
    assert [r.question_id for r in result.created] == ["QST0000001"]
    assert result.created[0].id == "QRS0000002"


def test_extra_answers_are_ignored():
    result = answers.reconcile(QUESTIONS, {}, ["a", "b", "c", "d"])
    assert len(result.responses) == 2


def test_no_questions_is_a_successful_no_op():
    result = answers.reconcile(None, None, ["stray"])
    assert result.ok
    assert result.responses == []


# --- Completeness rate ---

@pytest.mark.parametrize(
    "question_count, given, expected",
    [
        (4, ["a", "", "  ", "b"], 50.0),
        (2, ["a", "b"], 100.0),
        (3, [None, None, None], 0.0),
        (0, ["a"], 0.0),
    ],
)
def test_answer_completeness_rate(question_count, given, expected):
    assert answers.answer_completeness_rate(question_count, given) == pytest.approx(expected)
