"""
Code Buddy - Web API
Flask server for the kid-friendly code editor: diagnostics and fixes,
remote code execution, AI explanations and saved files.
"""
import json
import logging
import queue
from typing import Optional

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import BadRequest

from .assistant import CodeAssistant
from .checker import CheckReport, LiveChecker, check_code
from .config import (
    get_api_key_for_provider,
    get_available_providers,
    get_debounce_seconds,
    get_default_provider,
    get_files_dir,
    get_model_for_provider,
)
from .edits import apply_edit, edit_from_dict
from .executor import ExecutionClient, ExecutionServiceError
from .fix_suggester import suggest_fix
from .knowledge_base import explain
from .storage import FileStorage

logger = logging.getLogger(__name__)


def json_body() -> dict:
    """The request's JSON object; an empty dict when there is no JSON body."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def create_app(
    files_dir: str = None,
    executor: Optional[ExecutionClient] = None,
    assistant: Optional[CodeAssistant] = None,
    debounce_seconds: float = None
) -> Flask:
    """
    Build the Flask application.

    Collaborators default to the ones configured in the environment;
    pass them in to swap the execution service or AI provider.
    """
    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = 10 * 1024 * 1024  # 10MB max
    app.config['FILES_DIR'] = files_dir or get_files_dir()

    storage = FileStorage(app.config['FILES_DIR'])
    live_checker = LiveChecker(get_debounce_seconds() if debounce_seconds is None else debounce_seconds)

    # Store for SSE message queues (per document)
    event_queues: dict[str, list[queue.Queue]] = {}

    def publish(doc_id: str, report: CheckReport):
        for q in list(event_queues.get(doc_id, [])):
            q.put({"event": "diagnostics", "data": report.to_dict()})

    live_checker.add_listener(publish)

    app.extensions['live_checker'] = live_checker
    app.extensions['storage'] = storage

    def get_executor() -> ExecutionClient:
        nonlocal executor
        if executor is None:
            executor = ExecutionClient()
        return executor

    def get_assistant() -> Optional[CodeAssistant]:
        """Build the assistant for the default provider, or None if no key is set."""
        nonlocal assistant
        if assistant is None:
            provider = get_default_provider()
            api_key = get_api_key_for_provider(provider)
            if not api_key:
                return None
            assistant = CodeAssistant(api_key, get_model_for_provider(provider), provider=provider)
        return assistant

    @app.errorhandler(BadRequest)
    def bad_request(e: BadRequest):
        return jsonify({"error": e.description}), 400

    def assistant_missing():
        key_name = "OPENAI_API_KEY" if get_default_provider() == "openai" else "GEMINI_API_KEY"
        return jsonify({"error": f"{key_name} not set"}), 503

    # =========================================================================
    # Basics
    # =========================================================================

    @app.route('/')
    def index():
        return jsonify({"message": "Code Buddy API Server"})

    @app.route('/api/health')
    def health():
        return jsonify({"status": "ok"})

    # =========================================================================
    # Diagnostics & fixes
    # =========================================================================

    @app.route('/api/diagnostics', methods=['POST'])
    def diagnostics():
        data = json_body()
        code = data.get('code') or ""
        if not isinstance(code, str):
            return jsonify({"error": "Code must be a string"}), 400
        report = check_code(code, data.get('language', ''))
        return jsonify(report.to_dict())

    @app.route('/api/explain', methods=['POST'])
    def explain_error():
        data = json_body()
        return jsonify(explain(data.get('message') or "", data.get('language') or "").to_dict())

    @app.route('/api/fix', methods=['POST'])
    def fix():
        data = json_body()
        try:
            line = int(data.get('line') or 0)
        except (TypeError, ValueError):
            line = 0
        edit = suggest_fix(data.get('message') or "", data.get('language') or "", line, data.get('code') or "")
        return jsonify({"fix": edit.to_dict() if edit else None})

    @app.route('/api/fix/apply', methods=['POST'])
    def apply_fix():
        data = json_body()
        code = data.get('code')
        if not isinstance(code, str):
            return jsonify({"error": "Code is required"}), 400
        try:
            edit = edit_from_dict(data.get('fix'))
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        updated = apply_edit(code, edit)
        if updated is None:
            return jsonify({"error": "Fix no longer applies; run diagnostics again"}), 409
        return jsonify({"code": updated})

    # =========================================================================
    # Live (debounced) document checking
    # =========================================================================

    @app.route('/api/documents/<doc_id>', methods=['POST'])
    def document_changed(doc_id: str):
        data = json_body()
        code = data.get('code')
        if not isinstance(code, str):
            return jsonify({"error": "Code is required"}), 400
        live_checker.submit(doc_id, code, data.get('language', ''))
        return jsonify({"scheduled": True, "document": doc_id}), 202

    @app.route('/api/documents/<doc_id>', methods=['DELETE'])
    def document_closed(doc_id: str):
        live_checker.forget(doc_id)
        return jsonify({"success": True, "document": doc_id})

    @app.route('/api/documents/<doc_id>/diagnostics')
    def document_diagnostics(doc_id: str):
        report = live_checker.latest(doc_id)
        if report is None:
            return jsonify({"error": "No diagnostics yet", "pending": live_checker.pending(doc_id)}), 404
        return jsonify(report.to_dict())

    @app.route('/api/documents/<doc_id>/events')
    def document_events(doc_id: str):
        """SSE endpoint for diagnostic updates."""
        q: queue.Queue = queue.Queue()
        event_queues.setdefault(doc_id, []).append(q)

        def generate():
            try:
                latest = live_checker.latest(doc_id)
                if latest is not None:
                    yield f"data: {json.dumps({'event': 'diagnostics', 'data': latest.to_dict()})}\n\n"
                while True:
                    try:
                        msg = q.get(timeout=30)
                        yield f"data: {json.dumps(msg)}\n\n"
                    except queue.Empty:
                        # Send keepalive
                        yield f"data: {json.dumps({'event': 'ping'})}\n\n"
            finally:
                listeners = event_queues.get(doc_id, [])
                if q in listeners:
                    listeners.remove(q)
                if not listeners:
                    event_queues.pop(doc_id, None)

        return Response(
            generate(),
            mimetype='text/event-stream',
            headers={
                'Cache-Control': 'no-cache',
                'Connection': 'keep-alive'
            }
        )

    # =========================================================================
    # Code execution
    # =========================================================================

    @app.route('/api/execute', methods=['POST'])
    def execute():
        data = json_body()
        code = data.get('code')
        if not code:
            return jsonify({"error": "Code is required"}), 400

        try:
            result = get_executor().execute(code, data.get('language') or "javascript", data.get('stdin') or "")
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        except ExecutionServiceError as e:
            logger.error("Code execution error: %s", e)
            return jsonify({"error": f"Failed to execute code: {e}"}), 502

        return jsonify({
            "output": result.output,
            "error": result.error,
            "status": result.status,
            "finished": result.finished,
        })

    # =========================================================================
    # Files
    # =========================================================================

    @app.route('/api/files')
    def list_files():
        return jsonify([f.to_dict() for f in storage.list_files()])

    @app.route('/api/files/<filename>', methods=['GET'])
    def read_file(filename: str):
        try:
            return jsonify({"content": storage.read_file(filename)})
        except (FileNotFoundError, ValueError):
            return jsonify({"error": "File not found"}), 404

    @app.route('/api/files/<filename>', methods=['POST'])
    def save_file(filename: str):
        data = json_body()
        content = data.get('content', '')
        if not isinstance(content, str):
            return jsonify({"error": "Content must be a string"}), 400
        try:
            stored = storage.save_file(filename, content)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({"success": True, "message": "File saved successfully", "file": stored.to_dict()})

    @app.route('/api/files/<filename>', methods=['DELETE'])
    def delete_file(filename: str):
        try:
            storage.delete_file(filename)
        except (FileNotFoundError, ValueError):
            return jsonify({"error": "File not found"}), 404
        return jsonify({"success": True, "message": "File deleted successfully"})

    # =========================================================================
    # AI assistant (kept under /api/openai for the existing client)
    # =========================================================================

    @app.route('/api/openai/test')
    def assistant_test():
        helper = get_assistant()
        if helper is None:
            return assistant_missing()
        try:
            reply = helper.test_connection()
        except Exception as e:
            logger.exception("AI connection test failed")
            return jsonify({"status": "error", "error": f"Failed to connect to AI service: {e}"}), 500
        return jsonify({
            "status": "success",
            "message": f"{helper.provider} connection successful",
            "response": reply.text,
        })

    @app.route('/api/openai/analyze', methods=['POST'])
    def assistant_analyze():
        data = json_body()
        code, language = data.get('code'), data.get('language')
        if not code or not language:
            return jsonify({"error": "Code and language are required"}), 400

        helper = get_assistant()
        if helper is None:
            return assistant_missing()
        try:
            reply = helper.analyze(code, language, data.get('context') or "")
        except Exception as e:
            logger.exception("AI analysis failed")
            return jsonify({"error": f"Failed to analyze code: {e}"}), 500

        return jsonify({
            "analysis": reply.text,
            "model": reply.model,
            "code_blocks": [{"language": lang, "code": block} for lang, block in reply.code_blocks],
        })

    @app.route('/api/openai/chat', methods=['POST'])
    def assistant_chat():
        data = json_body()
        message = data.get('message')
        if not message:
            return jsonify({"error": "Message is required"}), 400

        helper = get_assistant()
        if helper is None:
            return assistant_missing()
        history = data.get('history') or []
        if not isinstance(history, list):
            history = []
        try:
            reply = helper.chat(message, data.get('language'), history)
        except Exception as e:
            logger.exception("AI chat failed")
            return jsonify({"error": f"Failed to process chat: {e}"}), 500

        return jsonify({"response": reply.text, "model": reply.model})

    @app.route('/api/providers')
    def providers():
        return jsonify({
            "default": get_default_provider(),
            "available": get_available_providers(),
        })

    return app
