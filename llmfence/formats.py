from __future__ import annotations

HEADER_PREFIX = "#### ["
CHECKLIST_PREFIX = "- ["
LINK_SEPARATOR = "]("

FENCE = "```"
NESTED_FENCE = "````"

COMMAND_PREFIX = "@"
VALIDATE_COMMAND = "@validate"
LIST_ONLY_OPTION = "@ls"

DEFAULT_LANGUAGE = "txt"
DEFAULT_ENCODING = "utf-8"

INCORRECT_HEADER_ERROR = "Incorrect file header"
