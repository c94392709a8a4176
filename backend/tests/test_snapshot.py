from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from quiz_engine.core.errors import DataCorruption, InvalidState
from quiz_engine.services.snapshot import build_snapshot, correct_option_index, dumps_snapshot, loads_snapshot


def _question(options, correct_flags, text="Pick one"):
    return SimpleNamespace(
        id=5,
        text=text,
        options=[SimpleNamespace(text=o, is_correct=f) for o, f in zip(options, correct_flags)],
    )


def test_build_snapshot_keeps_option_order_and_correct_index():
    q = _question(["a", "b", "c"], [False, False, True])
    snap = build_snapshot(q)
    assert snap.text == "Pick one"
    assert snap.options == ["a", "b", "c"]
    assert snap.correctAnswer == 2


def test_dumped_snapshot_has_fixed_shape():
    snap = build_snapshot(_question(["Đúng", "Sai"], [True, False], text="Câu hỏi"))
    raw = dumps_snapshot(snap)
    assert raw == '{"text": "Câu hỏi", "options": ["Đúng", "Sai"], "correctAnswer": 0}'
    assert json.loads(raw) == {"text": "Câu hỏi", "options": ["Đúng", "Sai"], "correctAnswer": 0}
    assert loads_snapshot(raw) == snap


@pytest.mark.parametrize("flags", [[False, False], [True, True]])
def test_question_needs_exactly_one_correct_option(flags):
    with pytest.raises(InvalidState) as exc:
        correct_option_index(_question(["x", "y"], flags))
    assert exc.value.details["question_id"] == 5


@pytest.mark.parametrize(
    "raw",
    [
        "",
        None,
        "{not json",
        '["text", "options"]',
        '{"text": "q", "options": ["a"]}',
        '{"text": "q", "options": ["a", "b"], "correctAnswer": 4}',
    ],
)
def test_unreadable_snapshot_is_data_corruption(raw):
    with pytest.raises(DataCorruption) as exc:
        loads_snapshot(raw, answer_id=77)
    assert exc.value.code == "DATA_CORRUPTION"
    assert exc.value.details["answer_id"] == 77
    assert exc.value.retryable is False
