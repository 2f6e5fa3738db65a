"""Dash callbacks wiring the layout to the engine and the catalog."""

import base64
import binascii
import logging

from dash import ALL, Input, Output, State, callback_context, no_update

from .exceptions import UploadRejected
from .layout import ACTIVE_SESSION_ID
from .store import STORAGE_KEY

logger = logging.getLogger(__name__)

NO_OUTPUT = "No output yet."


def decode_upload(contents: str, max_bytes: int) -> str:
    """Decodes a ``dcc.Upload`` data URL into text.

    Raises
    ------
    UploadRejected
        If the payload is not a base64 data URL, is larger than ``max_bytes``
        or is not text.
    """
    try:
        _, encoded = contents.split(",", 1)
        raw = base64.b64decode(encoded, validate=True)
    except (ValueError, binascii.Error) as exc:
        raise UploadRejected(f"Could not read the uploaded file: {exc}") from exc
    if len(raw) > max_bytes:
        raise UploadRejected(
            f"The uploaded file is {len(raw)} bytes; the limit is {max_bytes} bytes."
        )
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise UploadRejected("The uploaded file is not UTF-8 text.") from exc


def _options(values):
    return [{"label": value, "value": value} for value in values]


def register_callbacks(app):
    @app.callback(
        [
            Output("pattern_dropdown", "options"),
            Output("model_dropdown", "options"),
        ],
        [Input("pattern_dropdown", "id")],
    )
    def populate_catalog(_):
        return _options(app.catalog.list_patterns()), _options(app.catalog.list_models())

    @app.callback(
        [
            Output("input_textarea", "value", allow_duplicate=True),
            Output("upload_feedback", "children"),
        ],
        [Input("file_upload", "contents")],
        [State("file_upload", "filename")],
        prevent_initial_call=True,
    )
    def load_upload(contents, filename):
        if not contents:
            return no_update, no_update
        try:
            text = decode_upload(contents, app.settings.max_upload_bytes)
        except UploadRejected as exc:
            logger.warning("Rejected upload %s: %s", filename, exc)
            return no_update, str(exc)
        return text, ""

    @app.callback(
        [
            Output(STORAGE_KEY, "data"),
            Output(ACTIVE_SESSION_ID, "data"),
            Output("output_container", "children"),
            Output("input_textarea", "value"),
        ],
        [Input("submit_button", "n_clicks")],
        [
            State("input_textarea", "value"),
            State("pattern_dropdown", "value"),
            State("model_dropdown", "value"),
            State(ACTIVE_SESSION_ID, "data"),
            State(STORAGE_KEY, "data"),
        ],
        running=[
            (Output("submit_button", "disabled"), True, False),
            (Output("status_indicator", "hidden"), False, True),
        ],
        prevent_initial_call=True,
    )
    def submit(n_clicks, user_input, pattern, model, active_session_id, record):
        if not n_clicks or not user_input or not user_input.strip():
            return no_update, no_update, no_update, no_update

        result = app.engine.handle_submission(
            user_input, pattern, model, active_session_id, record
        )
        return (
            result["record"],
            result["active_session_id"],
            result["output"] or NO_OUTPUT,
            result["input_value"],
        )

    @app.callback(
        [
            Output(ACTIVE_SESSION_ID, "data", allow_duplicate=True),
            Output("output_container", "children", allow_duplicate=True),
        ],
        [Input("new_conversation_button", "n_clicks")],
        prevent_initial_call=True,
    )
    def new_chat(n_clicks):
        if not n_clicks:
            return no_update, no_update
        result = app.engine.new_chat()
        return result["active_session_id"], NO_OUTPUT

    @app.callback(
        Output(ACTIVE_SESSION_ID, "data", allow_duplicate=True),
        [Input({"type": "session-item", "id": ALL}, "n_clicks")],
        [State(STORAGE_KEY, "data")],
        prevent_initial_call=True,
    )
    def switch_session(n_clicks, record):
        # Re-rendering the list fires this with fresh zero counts.
        triggered = callback_context.triggered
        if not triggered or not triggered[0].get("value"):
            return no_update
        selected_id = callback_context.triggered_id["id"]
        return app.engine.select_session(selected_id, record)["active_session_id"]

    @app.callback(
        [
            Output("messages_container", "children"),
            Output("conversations_list", "children"),
        ],
        [
            Input(ACTIVE_SESSION_ID, "data"),
            Input(STORAGE_KEY, "data"),
        ],
    )
    def render_sessions(active_session_id, record):
        view = app.engine.select_session(active_session_id, record)
        sessions = app.store(record).load()
        items = app.layout_builder.build_session_items(sessions, view["active_session_id"])
        return view["messages"], items
