"""
Builds the function-calling schema of a parsed annotation.
"""

from typing import Any, Dict

from .models import ParsedAnnotation


def generate_schema(annotation: ParsedAnnotation) -> Dict[str, Any]:
    """
    Converts a parsed annotation into a JSON schema for LLM function calling.

    Args:
        annotation: The annotation to convert.

    Returns:
        A dictionary of the form
        ``{"type": "function", "function": {"name", "description", "parameters"}}``.
        A parameter is listed in ``required`` unless it is optional.
    """
    properties = {}
    required_params = []

    for param in annotation.params:
        param_info = param.fragment.to_schema()
        param_info["description"] = param.description
        if param.enum_values:
            param_info["enum"] = list(param.enum_values)

        properties[param.name] = param_info
        if not param.is_optional:
            required_params.append(param.name)

    return {
        "type": "function",
        "function": {
            "name": annotation.function_name,
            "description": annotation.notice,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": required_params,
            },
        },
    }
