"""
Shared, cross-cutting code for the API.

`core/` should contain small building blocks that multiple features use
(settings, the CMS HTTP client, column tables, error rendering). Keep
feature-specific mapping and lookup logic in the corresponding feature package
(e.g. `facilities/`).
"""
