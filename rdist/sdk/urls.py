"""Request path construction for the distribution API."""

from __future__ import annotations

from urllib.parse import quote

__all__ = ["app_name_param", "encode_component", "encode_path"]

# Characters left as-is, matching JavaScript's encodeURIComponent
_UNRESERVED = "-_.!~*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=_UNRESERVED)


def encode_path(template: str, *values: str) -> str:
    """Fill ``{}`` placeholders in ``template`` with percent-encoded values.

    The template itself is trusted and left untouched:

        encode_path("/apps/{}/deployments/{}", "My App", "Staging")
        -> "/apps/My%20App/deployments/Staging"

    Raises:
        ValueError: placeholder and value counts differ.
    """
    pieces = template.split("{}")
    if len(pieces) - 1 != len(values):
        raise ValueError(
            f"template has {len(pieces) - 1} placeholders but {len(values)} values were given"
        )
    out = [pieces[0]]
    for value, piece in zip(values, pieces[1:]):
        out.append(encode_component(value))
        out.append(piece)
    return "".join(out)


def app_name_param(app_name: str) -> str:
    """Escape ``/`` in an app name as ``~~``.

    The API's front proxy decodes ``%2F`` before routing, so an encoded slash
    would still split the path. The server maps ``~~`` back to ``/``.

    Every slash is replaced, not only the first one, so nested names such as
    ``org/team/app`` stay a single path segment.
    """
    return app_name.replace("/", "~~")
