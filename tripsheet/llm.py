"""OpenAI client helpers."""

import json
from typing import Any, Dict, List, Optional, Union

from openai import OpenAI

from .config import get_settings


_client: Optional[OpenAI] = None


def get_client() -> OpenAI:
    """Provide a singleton OpenAI client."""

    global _client
    if _client is None:
        settings = get_settings()
        _client = OpenAI(api_key=settings.openai_api_key)
    return _client


def function_call(
    content: Union[str, List[Dict[str, Any]]],
    *,
    name: str,
    description: str,
    parameters: Dict[str, Any],
    timeout: Optional[float] = None,
    model: Optional[str] = None,
    max_output_tokens: Optional[int] = None,
) -> Any:
    """Force a single function call and return its decoded JSON arguments.

    Raises ``RuntimeError`` when the model answers without calling the tool
    and ``json.JSONDecodeError`` when the arguments are not valid JSON.
    """

    settings = get_settings()
    client = get_client()
    if timeout is not None:
        client = client.with_options(timeout=timeout)
    if isinstance(content, str):
        content = [{"type": "input_text", "text": content}]
    tools = [
        {
            "type": "function",
            "name": name,
            "description": description,
            "parameters": parameters,
            "strict": False,
        }
    ]
    response = client.responses.create(
        model=model or settings.openai_model,
        input=[{"role": "user", "content": content}],
        tools=tools,
        tool_choice={"type": "function", "name": name},
        temperature=0,
        max_output_tokens=max_output_tokens or settings.max_output_tokens,
    )
    tool_call = next(
        (
            item
            for item in response.output
            if item.type == "function_call" and item.name == name
        ),
        None,
    )
    if tool_call is None:
        raise RuntimeError(f"Model did not return a {name} function call.")
    return json.loads(tool_call.arguments)
