"""Markup renderers for the operation model.

* :mod:`~specwiki.render.jira` -- Jira wiki markup, rendered from the
  ``templates/jira.txt.j2`` Jinja2 template.
"""

from specwiki.render.jira import to_jira

__all__ = ["to_jira"]
