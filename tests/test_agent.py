"""Tests for the upload graph with services stubbed out."""

from __future__ import annotations

from unittest.mock import patch

from tripsheet.agent import run_upload_pipeline, summarize_response
from tripsheet.services.extraction import ExtractionError
from tripsheet.session import sample_suggestions, sample_trip


@patch("tripsheet.agent.get_ai_suggestions", return_value=sample_suggestions())
@patch("tripsheet.agent.extract_trip_data", return_value=sample_trip())
def test_pipeline_happy_path(mock_extract, _mock_suggest):
    state = run_upload_pipeline(b"%PDF", "application/pdf")

    mock_extract.assert_called_once_with(b"%PDF", "application/pdf")
    summary = summarize_response(state)
    assert summary["is_complete"] is True
    assert summary["error"] is None
    assert summary["trip"]["trip_id"] == "HYXND2"
    assert [s["id"] for s in summary["suggestions"]] == ["s1", "s2"]
    assert summary["messages"][-1] == "Trip sheet ready for editing."


@patch("tripsheet.agent.get_ai_suggestions")
@patch("tripsheet.agent.extract_trip_data", side_effect=ExtractionError("Trip extraction failed"))
def test_extraction_failure_ends_run(_mock_extract, mock_suggest):
    state = run_upload_pipeline(b"%PDF", "application/pdf")

    assert state["error"] == "Trip extraction failed"
    assert state["trip"] is None
    assert state["is_complete"] is False
    mock_suggest.assert_not_called()


@patch("tripsheet.agent.get_ai_suggestions", side_effect=ExtractionError("timeout"))
@patch("tripsheet.agent.extract_trip_data", return_value=sample_trip())
def test_review_failure_keeps_trip(_mock_extract, _mock_suggest):
    state = run_upload_pipeline(b"%PDF", "application/pdf")

    assert state["error"] is None
    assert state["trip"]["trip_id"] == "HYXND2"
    assert state["suggestions"] == []
    assert state["is_complete"] is True


@patch("tripsheet.agent.get_ai_suggestions", return_value=[])
@patch("tripsheet.agent.extract_trip_data", return_value=sample_trip())
def test_runs_do_not_share_messages(_mock_extract, _mock_suggest):
    first = run_upload_pipeline(b"a", "application/pdf")
    second = run_upload_pipeline(b"b", "application/pdf")
    assert len(first["messages"]) == len(second["messages"]) == 3
