from __future__ import annotations

import datetime

import numpy as np
import pytest

from plan_import.models.hierarchy_id import (
    PhaseId,
    SubPhaseId,
    TaskId,
    Unrecognized,
    classify_hierarchy_id,
    hierarchy_id_text,
)


def test_bare_integer_is_phase():
    assert classify_hierarchy_id("3") == PhaseId(number="3")


def test_two_segments_is_subphase():
    assert classify_hierarchy_id(" 3.2 ") == SubPhaseId(phase_number="3", number="3.2")


def test_three_segments_is_task():
    assert classify_hierarchy_id("3.2.1") == TaskId(phase_number="3", sub_phase_number="3.2", number="3.2.1")


def test_deeper_task_keeps_first_two_segments_as_subphase():
    hid = classify_hierarchy_id("2.3.1.4")
    assert isinstance(hid, TaskId)
    assert hid.sub_phase_number == "2.3"
    assert hid.number == "2.3.1.4"


@pytest.mark.parametrize("raw", ["abc", "", "1.", ".1", "1..2", "1.a", "1-2", "Phase 1", "١"])
def test_malformed_ids_are_unrecognized(raw):
    hid = classify_hierarchy_id(raw)
    assert isinstance(hid, Unrecognized)
    assert hid.raw == raw


def test_numeric_cells():
    # Excel stores "1" / "1.1" typed as numbers
    assert classify_hierarchy_id(1) == PhaseId(number="1")
    assert classify_hierarchy_id(2.0) == PhaseId(number="2")
    assert classify_hierarchy_id(np.int64(4)) == PhaseId(number="4")
    assert classify_hierarchy_id(1.1) == SubPhaseId(phase_number="1", number="1.1")
    assert classify_hierarchy_id(np.float64(2.3)) == SubPhaseId(phase_number="2", number="2.3")


def test_non_id_values():
    assert isinstance(classify_hierarchy_id(None), Unrecognized)
    assert isinstance(classify_hierarchy_id(True), Unrecognized)
    assert isinstance(classify_hierarchy_id(float("nan")), Unrecognized)
    assert isinstance(classify_hierarchy_id(datetime.datetime(2024, 1, 1)), Unrecognized)
    assert hierarchy_id_text(datetime.date(2024, 1, 1)) is None
