"""
HTTP API for the GTD agent.

Two JSON endpoints exposing the AI service:
- POST /api/ai/advice
- POST /api/ai/chat
"""

import logging
from typing import Any, List, Optional, Type

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS
from pydantic import ValidationError as PydanticValidationError

from gtd.constants import (
    ERROR_INVALID_ADVICE_TYPE,
    ERROR_MESSAGE_REQUIRED,
    ERROR_TASK_REQUIRED,
    ERROR_TASKS_REQUIRED,
)
from gtd.exceptions import GTDError
from gtd.models.base import Context, Project, Record, Task
from gtd.services.ai_service import AIService

logger = logging.getLogger(__name__)

api = Blueprint("ai_api", __name__, url_prefix="/api/ai")


def create_app(ai_service: Optional[AIService] = None) -> Flask:
    """Build the Flask application.

    Args:
        ai_service: Service answering advice and chat requests. Defaults to
            one configured from the environment on every call.
    """
    app = Flask(__name__)
    CORS(app, resources={r"/api/*": {"origins": "*"}}, send_wildcard=True)
    app.extensions["gtd_ai_service"] = ai_service if ai_service is not None else AIService()
    app.register_blueprint(api)
    return app


def _service() -> AIService:
    return current_app.extensions["gtd_ai_service"]


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _parse_one(model: Type[Record], data: Any) -> Any:
    return model.model_validate(data)


def _parse_many(model: Type[Record], items: Any) -> List[Any]:
    """Validate a list of records; anything that is not a list counts as empty."""
    if not isinstance(items, list):
        return []
    return [model.model_validate(item) for item in items]


@api.route("/advice", methods=["POST"])
def advice():
    """Return {"advice": str} for one of the four advice types."""
    body = _json_body()
    advice_type = body.get("type")
    task_data = body.get("task")
    tasks = body.get("tasks", [])
    projects = body.get("projects", [])
    contexts = body.get("contexts", [])
    context = body.get("context")

    service = _service()
    try:
        if advice_type == "organization":
            if not task_data:
                return _error(ERROR_TASK_REQUIRED, 400)
            text = service.get_task_organization_advice(
                _parse_one(Task, task_data),
                _parse_many(Project, projects),
                _parse_many(Context, contexts),
            )
        elif advice_type == "scheduling":
            if not isinstance(tasks, list):
                return _error(ERROR_TASKS_REQUIRED, 400)
            text = service.get_scheduling_advice(_parse_many(Task, tasks))
        elif advice_type == "what-to-do-now":
            current_context = context.get("currentContext") if isinstance(context, dict) else None
            text = service.get_what_to_do_now_advice(
                _parse_many(Task, tasks),
                _parse_many(Context, contexts),
                current_context,
            )
        elif advice_type == "implementation":
            if not task_data:
                return _error(ERROR_TASK_REQUIRED, 400)
            text = service.get_implementation_guidance(_parse_one(Task, task_data))
        else:
            return _error(ERROR_INVALID_ADVICE_TYPE, 400)
    except PydanticValidationError as e:
        return _error(f"Invalid payload: {e.error_count()} validation error(s)", 400)
    except GTDError as e:
        logger.error(f"AI advice error: {e}")
        return _error(str(e), 500)

    return jsonify({"advice": text})


@api.route("/chat", methods=["POST"])
def chat():
    """Return {"response": str} for an open-ended message."""
    body = _json_body()
    message = body.get("message")
    if not message:
        return _error(ERROR_MESSAGE_REQUIRED, 400)

    context = body.get("context")
    if not isinstance(context, dict):
        context = {}

    try:
        current_task_data = context.get("currentTask")
        text = _service().chat(
            message,
            tasks=_parse_many(Task, context.get("tasks")),
            projects=_parse_many(Project, context.get("projects")),
            current_task=_parse_one(Task, current_task_data) if current_task_data else None,
        )
    except PydanticValidationError as e:
        return _error(f"Invalid payload: {e.error_count()} validation error(s)", 400)
    except GTDError as e:
        logger.error(f"AI chat error: {e}")
        return _error(str(e), 500)

    return jsonify({"response": text})
