"""
Schema-driven input validation.

A validator is a table of named schema nodes (pydantic models). `validate`
parses raw input against one node and returns a clean dict:

  - unknown fields are dropped silently
  - known fields are type- and constraint-checked
  - every violation is collected, not only the first one

Failures raise `ValidationError` whose details map each dotted field path to
its messages; model-level failures are reported under "_root":

    {"price": ["Input should be greater than or equal to 0"],
     "tags.0": ["Input should be a valid string"],
     "_root": ["At least one field must be provided"]}

Parsing the returned dict again yields the same dict.
"""

import logging
from collections import defaultdict
from typing import Any, ClassVar, Iterable, Mapping

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from crudkit.exceptions.base import APIError, ValidationError

logger = logging.getLogger(__name__)

ROOT_KEY = "_root"

# FastAPI prefixes locations with where the value came from
REQUEST_LOCATIONS = frozenset({"body", "query", "path", "header", "cookie"})


def _issue_message(issue: Mapping[str, Any]) -> str:
    # ValueErrors raised in our own validators come back as "Value error, <text>"
    error = (issue.get("ctx") or {}).get("error")
    if issue.get("type") == "value_error" and error is not None:
        return str(error)
    return issue.get("msg", "Invalid value")


def issues_to_details(issues: Iterable[Mapping[str, Any]], *, strip_location: bool = False) -> dict[str, list[str]]:
    """
    Collapse pydantic error dicts into {dotted_path: [messages]}.
    """
    details: dict[str, list[str]] = defaultdict(list)
    for issue in issues:
        loc = list(issue.get("loc") or ())
        if strip_location and loc and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        path = ".".join(str(part) for part in loc) or ROOT_KEY
        message = _issue_message(issue)
        if message not in details[path]:
            details[path].append(message)
    return dict(details)


class BaseValidator:
    """
    Subclasses fill `schemas` with their named nodes, e.g.

        class ProductValidator(BaseValidator):
            entity_name = "Product"
            schemas = {"create": ProductCreate, "update": ProductUpdate}
    """

    entity_name: ClassVar[str] = "Input"
    schemas: ClassVar[dict[str, type[BaseModel]]] = {}

    def validate(self, node_name: str, raw_input: Any) -> dict[str, Any]:
        """
        Raises:
            ValidationError: the input violates the node's schema
            APIError: no such node (a programming error, rendered as a 500)
        """
        schema = self.schemas.get(node_name)
        if schema is None:
            logger.error(
                "validator.unknown_schema",
                extra={"validator": type(self).__name__, "node": node_name},
            )
            raise APIError(
                f"Unknown validation schema '{node_name}' on {type(self).__name__}",
                is_operational=False,
            )
        return self._parse(schema, raw_input)

    def _parse(self, schema: type[BaseModel], raw_input: Any) -> dict[str, Any]:
        if raw_input is None:
            raw_input = {}
        if not isinstance(raw_input, Mapping):
            raise ValidationError(
                f"Invalid {self.entity_name} input",
                details={ROOT_KEY: ["Input should be an object"]},
            )

        try:
            parsed = schema.model_validate(dict(raw_input))
        except PydanticValidationError as exc:
            details = issues_to_details(exc.errors())
            logger.info(
                "validator.rejected",
                extra={"validator": type(self).__name__, "schema": schema.__name__, "fields": sorted(details)},
            )
            raise ValidationError(f"Invalid {self.entity_name} input", details=details) from exc

        return parsed.model_dump(exclude_none=True)
