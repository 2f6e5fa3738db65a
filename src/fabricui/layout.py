"""Concrete implementations for layout builders."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Sequence

from dash import dcc, html
from dash.development.base_component import Component as DashComponent

from .models import USER_ROLE, ChatMessage, ChatSession
from .store import STORAGE_KEY

ACTIVE_SESSION_ID = "active_session_store"

REQUIRED_IDS = {
    "input_textarea",
    "file_upload",
    "upload_feedback",
    "pattern_dropdown",
    "model_dropdown",
    "submit_button",
    "status_indicator",
    "output_container",
    "messages_container",
    "conversations_list",
    "new_conversation_button",
    STORAGE_KEY,
    ACTIVE_SESSION_ID,
}


def _walk(component: Any) -> Iterator[DashComponent]:
    if isinstance(component, (list, tuple)):
        for child in component:
            yield from _walk(child)
        return
    if not isinstance(component, DashComponent):
        return
    yield component
    yield from _walk(getattr(component, "children", None))


class Layout(ABC):
    """Interface for building the Dash component tree.

    The tree returned by ``build_layout`` must contain every ID in
    ``REQUIRED_IDS``; the callbacks are wired to them.
    """

    def __init__(self):
        self._layout = self.build_layout()
        self._components = {
            c.id: c for c in _walk(self._layout) if isinstance(getattr(c, "id", None), str)
        }
        missing = REQUIRED_IDS - set(self._components)
        if missing:
            raise ValueError(
                "Missing required component IDs: " + ", ".join(sorted(missing))
            )

    @abstractmethod
    def build_layout(self) -> DashComponent:
        """Constructs and returns the entire Dash component tree for the UI."""
        pass

    @abstractmethod
    def build_messages(self, messages: List[ChatMessage]) -> List[DashComponent]:
        """Converts a transcript into renderable components."""
        pass

    @abstractmethod
    def build_session_items(
        self, sessions: Sequence[ChatSession], active_id: Optional[str]
    ) -> List[DashComponent]:
        """Renders the clickable list of previous sessions.

        Each item must have the pattern-matching ID
        ``{"type": "session-item", "id": session.id}``.
        """
        pass

    @abstractmethod
    def get_external_stylesheets(self) -> List[Any]:
        pass

    def get_external_scripts(self) -> List[Any]:
        return []

    def get_component_keys(self) -> set:
        return set(self._components)

    def get_style(self, component_id: str) -> Optional[Dict[str, Any]]:
        component = self._components.get(component_id)
        return getattr(component, "style", None) if component is not None else None

    def get_class_name(self, component_id: str) -> Optional[str]:
        component = self._components.get(component_id)
        return getattr(component, "className", None) if component is not None else None


def _session_item_id(session: ChatSession) -> Dict[str, str]:
    return {"type": "session-item", "id": session.id}


class Bootstrap(Layout):
    """The default UI, built with dash-bootstrap-components."""

    def __init__(self, title: str = "Fabric UI"):
        self.title = title
        super().__init__()

    def build_layout(self) -> DashComponent:
        import dash_bootstrap_components as dbc

        return dbc.Container(
            fluid=True,
            className="py-3",
            children=[
                dcc.Store(id=STORAGE_KEY, storage_type="local"),
                dcc.Store(id=ACTIVE_SESSION_ID, storage_type="session"),
                html.H1(self.title, className="h3 mb-3"),
                dbc.Row(
                    [
                        dbc.Col(self.build_sidebar(), md=3),
                        dbc.Col([self.build_form(), self.build_output()], md=9),
                    ]
                ),
            ],
        )

    def build_sidebar(self) -> DashComponent:
        import dash_bootstrap_components as dbc

        return html.Div(
            [
                dbc.Button(
                    "New chat",
                    id="new_conversation_button",
                    color="secondary",
                    className="w-100 mb-2",
                    n_clicks=0,
                ),
                dbc.ListGroup(id="conversations_list", children=[]),
            ]
        )

    def build_form(self) -> DashComponent:
        import dash_bootstrap_components as dbc

        return html.Div(
            className="mb-3",
            children=[
                dbc.Label("Input (Text or YouTube URL)", html_for="input_textarea"),
                dbc.Textarea(
                    id="input_textarea",
                    placeholder="Enter text or YouTube URL",
                    rows=4,
                    className="mb-2",
                ),
                dcc.Upload(
                    id="file_upload",
                    children=html.Div(["Or upload a file: ", html.A("select a file")]),
                    className="border rounded p-2 mb-1 text-center",
                    multiple=False,
                ),
                html.Small(id="upload_feedback", className="text-danger"),
                dbc.Label("Pattern", html_for="pattern_dropdown", className="mt-2"),
                dcc.Dropdown(id="pattern_dropdown", placeholder="Select a pattern", options=[]),
                dbc.Label("Model", html_for="model_dropdown", className="mt-2"),
                dcc.Dropdown(id="model_dropdown", placeholder="Select a model", options=[]),
                dbc.Button(
                    "Execute",
                    id="submit_button",
                    color="primary",
                    className="w-100 mt-3",
                    n_clicks=0,
                ),
                html.Div(
                    dbc.Spinner(size="sm"),
                    id="status_indicator",
                    hidden=True,
                    className="text-center mt-2",
                ),
            ],
        )

    def build_output(self) -> DashComponent:
        import dash_bootstrap_components as dbc

        return html.Div(
            [
                html.H2("Output:", className="h5"),
                dbc.Card(
                    dbc.CardBody(dcc.Markdown("No output yet.", id="output_container")),
                    className="mb-3",
                    style={"maxHeight": "16rem", "overflowY": "auto"},
                ),
                html.H2("Conversation", className="h5"),
                html.Div(id="messages_container", children=[]),
            ]
        )

    def build_messages(self, messages: List[ChatMessage]) -> List[DashComponent]:
        import dash_bootstrap_components as dbc

        rendered = []
        for message in messages:
            if message.role == USER_ROLE:
                color, class_name = "light", "ms-auto"
            else:
                color = "danger" if message.failed else "white"
                class_name = "me-auto"
            rendered.append(
                dbc.Card(
                    dbc.CardBody(dcc.Markdown(message.content)),
                    color=color,
                    className=f"mb-2 {class_name}",
                    style={"maxWidth": "85%", "width": "fit-content"},
                )
            )
        return rendered

    def build_session_items(self, sessions, active_id) -> List[DashComponent]:
        import dash_bootstrap_components as dbc

        return [
            dbc.ListGroupItem(
                session.title,
                id=_session_item_id(session),
                action=True,
                active=session.id == active_id,
                n_clicks=0,
            )
            for session in reversed(sessions)
        ]

    def get_external_stylesheets(self) -> List[Any]:
        import dash_bootstrap_components as dbc

        return [dbc.themes.BOOTSTRAP]


class Minimal(Layout):
    """A plain dash.html layout with no extra dependencies."""

    def build_layout(self) -> DashComponent:
        return html.Div(
            [
                dcc.Store(id=STORAGE_KEY, storage_type="local"),
                dcc.Store(id=ACTIVE_SESSION_ID, storage_type="session"),
                html.H1("Fabric UI"),
                html.Button("New chat", id="new_conversation_button", n_clicks=0),
                html.Ul(id="conversations_list", children=[]),
                dcc.Textarea(id="input_textarea", style={"width": "100%"}),
                dcc.Upload(id="file_upload", children=html.Button("Upload a file")),
                html.Div(id="upload_feedback"),
                dcc.Dropdown(id="pattern_dropdown", placeholder="Select a pattern"),
                dcc.Dropdown(id="model_dropdown", placeholder="Select a model"),
                html.Button("Execute", id="submit_button", n_clicks=0),
                html.Div("Running...", id="status_indicator", hidden=True),
                dcc.Markdown("No output yet.", id="output_container"),
                html.Div(id="messages_container", children=[]),
            ]
        )

    def build_messages(self, messages: List[ChatMessage]) -> List[DashComponent]:
        return [
            html.Div([html.Strong(f"{message.role}: "), dcc.Markdown(message.content)])
            for message in messages
        ]

    def build_session_items(self, sessions, active_id) -> List[DashComponent]:
        return [
            html.Li(
                html.A(session.title, id=_session_item_id(session), n_clicks=0, href="#"),
                className="active" if session.id == active_id else "",
            )
            for session in reversed(sessions)
        ]

    def get_external_stylesheets(self) -> List[Any]:
        return []
