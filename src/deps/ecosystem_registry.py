"""Built-in ecosystem definitions and build-spec overrides."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from core.build_spec import BuildSpec, EcosystemOverride
from core.errors import BuildSpecError
from core.types import Ecosystem, EcosystemSpec

# Node first: later stages run tools installed into node_modules.
ECOSYSTEM_ORDER: tuple[Ecosystem, ...] = (
    Ecosystem.NODE_MODULES,
    Ecosystem.RUBY_GEMS,
    Ecosystem.BROWSER_PACKAGES,
)

NODE_MODULES_SPEC = EcosystemSpec(
    ecosystem=Ecosystem.NODE_MODULES,
    manifest_file="package.json",
    working_tree="node_modules",
    install_command=("npm", "install"),
    prune_command=("npm", "prune"),
    rebuild_command=("npm", "rebuild"),
    tracks_version=True,
    path_entries=("node_modules/.bin",),
)

RUBY_GEMS_SPEC = EcosystemSpec(
    ecosystem=Ecosystem.RUBY_GEMS,
    manifest_file="Gemfile",
    working_tree="vendor/bundle",
    install_command=(
        "bundle",
        "install",
        "--path",
        "vendor/bundle",
        "--binstubs",
        "vendor/bundle/bin",
    ),
    prune_command=("bundle", "clean"),
    rebuild_command=("bundle", "pristine"),
    path_entries=("vendor/bundle/bin",),
)

BROWSER_PACKAGES_SPEC = EcosystemSpec(
    ecosystem=Ecosystem.BROWSER_PACKAGES,
    manifest_file="bower.json",
    working_tree="bower_components",
    install_command=("bower", "install"),
    prune_command=("bower", "prune"),
)


def default_ecosystem_specs() -> tuple[EcosystemSpec, ...]:
    """Return built-in ecosystem specs in reconcile order."""
    return (NODE_MODULES_SPEC, RUBY_GEMS_SPEC, BROWSER_PACKAGES_SPEC)


def order_specs(specs: Sequence[EcosystemSpec]) -> tuple[EcosystemSpec, ...]:
    """Sort specs into the fixed reconcile order.

    Raises:
        BuildSpecError: If two specs describe the same ecosystem.
    """
    by_ecosystem: dict[Ecosystem, EcosystemSpec] = {}
    for spec in specs:
        if spec.ecosystem in by_ecosystem:
            raise BuildSpecError(f"Ecosystem '{spec.ecosystem.value}' is configured twice.")
        by_ecosystem[spec.ecosystem] = spec
    return tuple(by_ecosystem[eco] for eco in ECOSYSTEM_ORDER if eco in by_ecosystem)


def apply_build_spec(
    specs: Sequence[EcosystemSpec],
    build_spec: BuildSpec | None,
) -> tuple[EcosystemSpec, ...]:
    """Apply build-spec overrides on top of ecosystem specs."""
    if build_spec is None:
        return tuple(specs)
    return tuple(
        _apply_override(spec, build_spec.ecosystems[spec.ecosystem])
        if spec.ecosystem in build_spec.ecosystems
        else spec
        for spec in specs
    )


def _apply_override(spec: EcosystemSpec, override: EcosystemOverride) -> EcosystemSpec:
    rebuild_command = spec.rebuild_command
    if override.rebuild_disabled:
        rebuild_command = None
    elif override.rebuild_command is not None:
        rebuild_command = override.rebuild_command
    return replace(
        spec,
        install_command=override.install_command or spec.install_command,
        prune_command=override.prune_command or spec.prune_command,
        rebuild_command=rebuild_command,
        tracks_version=(
            spec.tracks_version if override.tracks_version is None else override.tracks_version
        ),
        manifest_file=override.manifest_file or spec.manifest_file,
        working_tree=override.working_tree or spec.working_tree,
    )
