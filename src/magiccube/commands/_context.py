"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Owns the process's definition slot and plugin manager
(both built lazily so ``--help`` never loads plugins) and routes results to
stdout/stderr with the right exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from magiccube.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from magiccube.config.settings import MagicCubeSettings
    from magiccube.plugins.manager import PluginManager
    from magiccube.services.definition import DefinitionSlot
    from magiccube.services.fractal import FractalService
    from magiccube.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: MagicCubeSettings) -> None:
        self.settings = settings
        self._slot: DefinitionSlot | None = None
        self._plugins: PluginManager | None = None

        from magiccube.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from magiccube.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def slot(self) -> DefinitionSlot:
        """The definition slot, seeded from the [fractal] config section."""
        if self._slot is None:
            from magiccube.domain.codec import decode
            from magiccube.domain.errors import InvalidDepth, InvalidMatrix
            from magiccube.services.definition import DefinitionSlot, FractalDefinition

            cfg = self.settings.fractal
            try:
                initial = FractalDefinition(matrix=decode(cfg.matrix), depth=cfg.depth)
                self._slot = DefinitionSlot(initial, max_depth=self.settings.limits.max_depth)
            except (InvalidMatrix, InvalidDepth) as exc:
                msg = f"Invalid [fractal] configuration: {exc}"
                raise click.ClickException(msg) from exc
        return self._slot

    @property
    def plugins(self) -> PluginManager | None:
        """The loaded plugin manager, or None when plugins are disabled."""
        if not self.settings.plugins.enabled:
            return None
        if self._plugins is None:
            from magiccube.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load(local_dir=self.settings.plugin_dir)
        return self._plugins

    def service(self, **overrides: Any) -> FractalService:
        """Build a FractalService from settings; *overrides* win over config."""
        from magiccube.domain.placement import Vec3
        from magiccube.services.fractal import FractalService

        cfg = self.settings.fractal
        options: dict[str, Any] = {
            "base_scale": cfg.base_scale,
            "base_position": Vec3(*cfg.base_position),
            "max_leaves": self.settings.limits.max_leaves,
            "obj_precision": self.settings.output.obj_precision,
        }
        options.update({k: v for k, v in overrides.items() if v is not None})
        return FractalService(self.slot, self.plugins, **options)

    def apply_edits(
        self,
        svc: FractalService,
        *,
        depth: int | None = None,
        matrix_text: str | None = None,
    ) -> None:
        """Apply command-line edits to the slot; a rejected edit exits with code 1."""
        if matrix_text is not None:
            self._emit_edit(svc.set_matrix(matrix_text))
        if depth is not None:
            self._emit_edit(svc.set_depth(depth))

    def _emit_edit(self, result: ServiceResult) -> None:
        if not result.ok:
            self.emit(result)
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)

    def emit(self, result: ServiceResult, *, to_stderr: bool = False) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout (or stderr when stdout carries geometry).
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output, err=to_stderr)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
