"""LangGraph upload pipeline: extract, review, finish.

The graph is what the HTTP API and the editing session run for every
uploaded trip sheet. Extraction failure ends the run with ``error`` set and
no trip; a failed review only costs the suggestions.
"""

from __future__ import annotations

import base64
import logging
import operator
from functools import lru_cache
from typing import Annotated, Any, Dict, List, Optional, TypedDict
from uuid import uuid4

from langchain_core.messages import AIMessage
from langgraph.checkpoint.memory import MemorySaver
from langgraph.graph import END, StateGraph

from .models import suggestion_to_dict, trip_from_dict, trip_to_dict
from .services.extraction import ExtractionError, extract_trip_data
from .services.suggestions import get_ai_suggestions


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# LangGraph state schema
# ---------------------------------------------------------------------------


class UploadState(TypedDict):
    messages: Annotated[List, operator.add]
    file_data: str
    mime_type: str
    trip: Optional[Dict[str, Any]]
    suggestions: List[Dict[str, Any]]
    current_step: str
    is_complete: bool
    error: Optional[str]


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


def extract_node(state: UploadState) -> Dict[str, Any]:
    file_bytes = base64.b64decode(state["file_data"])
    try:
        trip = extract_trip_data(file_bytes, state["mime_type"])
    except (ExtractionError, ValueError) as exc:
        logger.warning("Extraction failed: %s", exc)
        return {
            "error": str(exc),
            "current_step": "failed",
            "messages": [AIMessage(content="Failed to extract trip data.")],
        }
    msg = f"Extracted trip {trip.trip_id} with {len(trip.legs)} leg(s)."
    return {
        "trip": trip_to_dict(trip),
        "current_step": "suggest",
        "messages": [AIMessage(content=msg)],
    }


def suggest_node(state: UploadState) -> Dict[str, Any]:
    trip = trip_from_dict(state["trip"])
    try:
        suggestions = get_ai_suggestions(trip)
    except (ExtractionError, ValueError) as exc:
        logger.warning("Suggestions unavailable: %s", exc)
        return {
            "suggestions": [],
            "current_step": "final_output",
            "messages": [AIMessage(content="AI review unavailable for this trip.")],
        }
    return {
        "suggestions": [suggestion_to_dict(s) for s in suggestions],
        "current_step": "final_output",
        "messages": [AIMessage(content=f"{len(suggestions)} suggestion(s) found.")],
    }


def final_output(state: UploadState) -> Dict[str, Any]:
    return {
        "is_complete": True,
        "current_step": "complete",
        "messages": [AIMessage(content="Trip sheet ready for editing.")],
    }


def _route_after_extract(state: UploadState) -> str:
    return "end" if state.get("error") else "suggest"


# ---------------------------------------------------------------------------
# Graph compilation / execution helpers
# ---------------------------------------------------------------------------


def _build_graph():
    workflow = StateGraph(UploadState)
    workflow.add_node("extract", extract_node)
    workflow.add_node("suggest", suggest_node)
    workflow.add_node("final_output", final_output)

    workflow.set_entry_point("extract")
    workflow.add_conditional_edges(
        "extract", _route_after_extract, {"suggest": "suggest", "end": END}
    )
    workflow.add_edge("suggest", "final_output")
    workflow.add_edge("final_output", END)
    memory = MemorySaver()
    return workflow.compile(checkpointer=memory)


@lru_cache(maxsize=1)
def get_upload_app():
    return _build_graph()


def build_initial_state(file_bytes: bytes, mime_type: str) -> UploadState:
    return {
        "messages": [],
        "file_data": base64.b64encode(file_bytes).decode("ascii"),
        "mime_type": mime_type,
        "trip": None,
        "suggestions": [],
        "current_step": "extract",
        "is_complete": False,
        "error": None,
    }


def run_upload_pipeline(
    file_bytes: bytes, mime_type: str, *, thread_id: Optional[str] = None
) -> UploadState:
    initial_state = build_initial_state(file_bytes, mime_type)
    app = get_upload_app()
    config = {"configurable": {"thread_id": thread_id or f"upload-{uuid4()}"}}
    final_state: UploadState = app.invoke(initial_state, config=config)
    return final_state


def summarize_response(state: UploadState) -> Dict[str, object]:
    return {
        "trip": state.get("trip"),
        "suggestions": state.get("suggestions", []),
        "messages": [m.content for m in state.get("messages", [])],
        "is_complete": state.get("is_complete", False),
        "error": state.get("error"),
    }
