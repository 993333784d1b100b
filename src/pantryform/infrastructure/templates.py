"""Template lookup with per-workspace override support.

Order-form templates use opaque ``{{token}}`` placeholders (``{{1Name}}``
is not a valid Jinja2 expression), so templates are never rendered by
Jinja2. The Jinja2 loader chain is used only to locate the source text:
workspace overrides in ``.pantryform/templates/`` win over the packaged
defaults.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader


def build_template_loader(group: str, *, state_dir: Path | None = None) -> ChoiceLoader:
    """Build a loader chain with user overrides before packaged defaults.

    Both ``.pantryform/templates/{group}/`` and the flat
    ``.pantryform/templates/`` directory are searched.
    """
    loaders: list[BaseLoader] = []
    if state_dir is not None:
        template_root = state_dir / "templates"
        loaders.append(FileSystemLoader([str(template_root / group), str(template_root)]))

    loaders.append(PackageLoader("pantryform", f"templates/{group}"))
    return ChoiceLoader(loaders)


def load_template_source(name: str, *, group: str = "forms", state_dir: Path | None = None) -> str:
    """Return the raw text of template *name*.

    Raises:
        jinja2.TemplateNotFound: If no loader provides *name*.
    """
    loader = build_template_loader(group, state_dir=state_dir)
    env = Environment(loader=loader, keep_trailing_newline=True)
    source, _filename, _uptodate = loader.get_source(env, name)
    return source
