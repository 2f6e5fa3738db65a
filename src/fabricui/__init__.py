"""
The main entrypoint for the FabricUI package.

This module contains the FabricUI application class, which assembles the
pillars (layout, catalog, command builder, runner, store and engine) into a
Dash app that submits text or YouTube URLs to the ``fabric`` command-line
tool.
"""

from typing import Callable, Optional

from dash import Dash

from . import catalog, commands, engine, layout, runner, store
from .config import Settings


class FabricUI(Dash):
    """
    A browser front end for the ``fabric`` text-processing tool.

    Each pillar can be injected; anything left out is built from ``settings``.
    """

    def __init__(
        self,
        layout: Optional["layout.Layout"] = None,
        catalog: Optional["catalog.Catalog"] = None,
        builder: Optional["commands.CommandBuilder"] = None,
        runner: Optional["runner.Runner"] = None,
        store: Optional[Callable[[Optional[str]], "store.Store"]] = None,
        engine: Optional["engine.Engine"] = None,
        settings: Optional[Settings] = None,
        **kwargs,
    ) -> None:
        """
        Initialize the application with configurable pillars.

        Parameters
        ----------
        layout : layout.Layout, optional
            Layout builder for the Dash component tree. Defaults to
            layout.Bootstrap(), or layout.Minimal() when
            dash-bootstrap-components is not installed.
        catalog : catalog.Catalog, optional
            Source of pattern and model names. Defaults to
            catalog.Filesystem over ``settings.patterns_dir``.
        builder : commands.CommandBuilder, optional
            Turns submissions into invocations. Defaults to commands.Fabric.
        runner : runner.Runner, optional
            Executes invocations. Defaults to runner.Subprocess with
            ``settings.timeout``.
        store : callable, optional
            Factory that wraps the browser's persisted record in a
            store.Store. Defaults to store.LocalStorage.
        engine : engine.Engine, optional
            Request orchestrator. Defaults to engine.Synchronous configured
            from ``settings``.
        settings : config.Settings, optional
            Runtime settings. Defaults to ``Settings()``.
        **kwargs
            Additional arguments passed to the Dash constructor.
        """
        self.settings = settings if settings is not None else Settings()

        if layout:
            self.layout_builder = layout
        else:
            try:
                from .layout import Bootstrap

                self.layout_builder = Bootstrap()
            except ImportError:
                import warnings

                warnings.warn(
                    "FabricUI is running with a minimal layout because "
                    "'dash-bootstrap-components' is not installed.",
                    UserWarning,
                )
                from .layout import Minimal

                self.layout_builder = Minimal()

        catalog_module = globals()["catalog"]
        commands_module = globals()["commands"]
        runner_module = globals()["runner"]
        store_module = globals()["store"]
        engine_module = globals()["engine"]

        kwargs.setdefault("title", "Fabric UI")
        kwargs.setdefault("external_stylesheets", [])
        kwargs["external_stylesheets"].extend(
            self.layout_builder.get_external_stylesheets()
        )
        kwargs.setdefault("external_scripts", [])
        kwargs["external_scripts"].extend(self.layout_builder.get_external_scripts())

        super().__init__(**kwargs)

        self.catalog = (
            catalog
            if catalog is not None
            else catalog_module.Filesystem(self.settings.patterns_dir, self.settings.models)
        )
        self.builder = (
            builder
            if builder is not None
            else commands_module.Fabric(
                self.settings.fabric_path, self.settings.transcript_path
            )
        )
        self.runner = (
            runner
            if runner is not None
            else runner_module.Subprocess(timeout=self.settings.timeout)
        )
        self.store = store if store is not None else store_module.LocalStorage
        self.engine = (
            engine
            if engine is not None
            else engine_module.Synchronous(
                failure_policy=self.settings.failure_policy,
                strict_selections=self.settings.strict_selections,
            )
        )
        self.engine.app = self

        self.layout = self.layout_builder.build_layout()
        self._register_callbacks()

    def _register_callbacks(self) -> None:
        """Registers the Dash callbacks and the JSON API routes."""
        from .api import register_routes
        from .callbacks import register_callbacks

        register_callbacks(self)
        register_routes(self)
