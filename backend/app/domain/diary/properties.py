"""Property transformation for the duplicated diary page."""

from __future__ import annotations

import copy
import re
from datetime import date
from typing import Any, Iterable, Mapping

from ...config.loader import DEFAULT_READ_ONLY_PROPERTIES, DEFAULT_TITLE_FORMAT
from ...infra.logging import get_logger
from .errors import MalformedEntryError
from .models import ENTRY_DATE_PROPERTY, NAME_PROPERTY, DateProperty, FieldSet, TitleProperty

__all__ = ["format_title", "format_new_diary_properties"]

logger = get_logger(__name__)


DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_NAME_DIRECTIVE = re.compile(r"%([%AaBb])")


def format_title(today: date, title_format: str = DEFAULT_TITLE_FORMAT) -> str:
    """Render the display title, e.g. ``Monday, 03 June``.

    Day and month names always come out in English; the remaining directives
    go through ``strftime``.
    """

    def _name(match: re.Match) -> str:
        directive = match.group(1)
        if directive == "%":
            return "%%"
        if directive in "Aa":
            name = DAY_NAMES[today.weekday()]
        else:
            name = MONTH_NAMES[today.month - 1]
        return name if directive.isupper() else name[:3]

    return today.strftime(_NAME_DIRECTIVE.sub(_name, title_format))


def format_new_diary_properties(
    properties: Mapping[str, Any],
    *,
    today: date,
    title_format: str = DEFAULT_TITLE_FORMAT,
    read_only: Iterable[str] = DEFAULT_READ_ONLY_PROPERTIES,
) -> FieldSet:
    """Return a copy of ``properties`` ready to create today's page.

    Server-managed properties are dropped, the first title fragment is renamed
    and the entry date moves to ``today``. The input is left untouched.
    """

    new_props: FieldSet = copy.deepcopy(dict(properties))
    for name in read_only:
        new_props.pop(name, None)

    try:
        title = TitleProperty.parse(NAME_PROPERTY, new_props.get(NAME_PROPERTY))
        entry_date = DateProperty.parse(
            ENTRY_DATE_PROPERTY, new_props.get(ENTRY_DATE_PROPERTY)
        )
    except MalformedEntryError as exc:
        logger.error("diary_properties_malformed", extra={"reason": str(exc)})
        raise

    title.rename(format_title(today, title_format))
    entry_date.payload["start"] = today.isoformat()

    logger.debug(
        "diary_properties_formatted",
        extra={"properties": new_props},
    )
    return new_props
