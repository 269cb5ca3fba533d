"""User-facing text rendered with Jinja2.

The usage screen and the success banners depend on the packaged templates
and on whether the project was generated in place, so they are kept as small
inline templates.
"""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, StrictUndefined

_env = Environment(
    autoescape=False,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=StrictUndefined,
)

TEMPLATE_DESCRIPTIONS: dict[str, str] = {
    "basicapp": "Basic app with routing and features",
    "welcomeapp": "Landing page focused app",
    "userapp": "User management app",
    "todoapp": "Todo application",
}

USAGE = """\
Helix Framework - Fullstack Apps

Usage:
  helix create <project-name> [template]  Create new fullstack project
  helix create . [template]               Install in current directory
  helix start                             Start the production build

Templates:
{% for name in templates %}
  {{ "%-11s" | format(name) }} {{ descriptions.get(name, "") }}{% if name == default %} (default){% endif %}{% if name not in packaged %} (coming soon){% endif %}

{% endfor %}

Options:
  --verbose   Print every generation step

Examples:
  helix create my-app                    # Create {{ default }} in my-app/ directory
  helix create my-app {{ default }}           # Same as above
  helix create . {{ default }}                # Install {{ default }} in current directory
"""

_DEV_COMMANDS = """\
Development:
  npm run dev           # Both API (3000) + Web (5173)
  npm run dev:api       # Backend only
  npm run dev:web       # Frontend only
  npm run dev:fullstack # Unified experience
"""

SUCCESS = """\
{% if in_place %}
Helix {{ template }} installed successfully!

""" + _DEV_COMMANDS + """
Run "npm run dev" to get started!
{% else %}
Helix {{ template }} project {{ project_name }} created successfully!

Next steps:
  cd {{ project_name }}
  npm run dev

""" + _DEV_COMMANDS + """{% endif %}
"""


def render(template: str, /, **context: Any) -> str:
    """Render an inline message template."""
    return _env.from_string(template).render(**context)


def usage_text(templates: list[str], packaged: list[str], default: str) -> str:
    """Usage screen listing every known template."""
    return render(
        USAGE,
        templates=templates,
        packaged=packaged,
        default=default,
        descriptions=TEMPLATE_DESCRIPTIONS,
    )


def success_text(template: str, project_name: str, in_place: bool) -> str:
    """Banner printed after a successful generation."""
    return render(SUCCESS, template=template, project_name=project_name, in_place=in_place)
