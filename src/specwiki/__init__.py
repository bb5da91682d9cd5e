"""specwiki -- Render Swagger 2.0 API documents as Jira wiki markup.

This package reads a Swagger 2.0 style document (YAML or JSON), groups its
operations by tag, resolves the named schemas under ``definitions`` and
writes the result as Jira wiki text: one section per tag, one subsection per
operation, with query, request and response tables.

Typical workflow::

    specwiki convert --in api.yml --out api.txt
    specwiki serve --port 9999        # POST /convert with the document

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models for configuration and the operation model.
    config: XDG-aware configuration with precedence resolution.
    converter: Load, build, render and write pipeline.
    server: HTTP serving mode.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
