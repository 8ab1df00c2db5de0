"""Quire Core - Directive-based HTML template engine and static page builder.

Renders page templates with variables, conditionals, loops, partials and
layout yields, then writes the results as a static site.
"""

from quire_core.site import SiteGenerator
from quire_core.template import TemplateEngine

__version__ = "0.1.0"
__all__ = ["__version__", "TemplateEngine", "SiteGenerator"]
