"""Keyword table and thresholds used to classify events.

The defaults reproduce the venue's historical title conventions. Operators
can override them with a YAML file:

.. code-block:: yaml

    type_rules:
      - event_type: Open Mic
        keywords: [open mic]
      - event_type: Fundraiser
        keywords: [fundraiser, benefit]
    recurring_keywords: [open mic, jam night]
    sales:
      high: 30

"""

from __future__ import annotations

from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .models import EventType

YAML_VERSION = (1, 2)


class TypeRule(msgspec.Struct, kw_only=True, frozen=True):
    """Map any of ``keywords`` (lower-case substrings) to ``event_type``."""

    event_type: EventType
    keywords: tuple[str, ...]


class SalesThresholds(msgspec.Struct, kw_only=True, frozen=True):
    """Ticket counts and day windows for sales status.

    Attributes
    ----------
    high
        Minimum tickets sold for ``high``.
    medium
        Minimum tickets sold for ``medium``.
    urgent_days
        Events this many days out (or fewer) with no sales are ``urgent``.

    """

    high: int = 25
    medium: int = 10
    urgent_days: int = 7


class PopularityThresholds(msgspec.Struct, kw_only=True, frozen=True):
    """Attendance cut-offs; counts strictly above each bound qualify."""

    high: int = 20
    medium: int = 10
    soon_days: int = 7


class ClassificationConfig(msgspec.Struct, kw_only=True, frozen=True):
    """Configurable rules for event classification.

    Attributes
    ----------
    type_rules
        Ordered rules; the first rule with a matching keyword wins.
    default_type
        Type assigned when no rule matches.
    recurring_keywords
        Title substrings marking a regular weekly or monthly event.
    rsvp_only_keywords
        Title substrings marking events that take RSVPs instead of selling
        tickets.
    sales
        Thresholds for :func:`classify_sales_status`.
    popularity
        Thresholds for :func:`classify_popularity`.

    """

    type_rules: tuple[TypeRule, ...] = (
        TypeRule(event_type=EventType.OPEN_MIC, keywords=("open mic",)),
        TypeRule(event_type=EventType.JAM_SESSION, keywords=("jam",)),
        TypeRule(event_type=EventType.WORKSHOP, keywords=("lessons", "songwriting")),
        TypeRule(event_type=EventType.FUNDRAISER, keywords=("fundraiser",)),
    )
    default_type: EventType = EventType.CONCERT
    recurring_keywords: tuple[str, ...] = ("open mic", "jam night", "voice lessons")
    rsvp_only_keywords: tuple[str, ...] = ("open mic", "jam", "lessons", "songwriting")
    sales: SalesThresholds = msgspec.field(default_factory=SalesThresholds)
    popularity: PopularityThresholds = msgspec.field(
        default_factory=PopularityThresholds
    )


DEFAULT_CLASSIFICATION_CONFIG = ClassificationConfig()


class ClassificationConfigError(ValueError):
    """Raised when a classification YAML file cannot be used."""

    def __init__(self, issues: list[str]) -> None:
        """Capture the issues whilst keeping an aggregated message."""
        super().__init__("\n".join(issues))
        self.issues = issues


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml


def load_classification_config(path: Path | str) -> ClassificationConfig:
    """Load a classification table from YAML, validating its shape."""
    path_obj = Path(path)
    try:
        loaded = _yaml().load(path_obj.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as exc:
        raise ClassificationConfigError([f"failed to parse YAML: {exc}"]) from exc

    if loaded is None:
        return DEFAULT_CLASSIFICATION_CONFIG

    try:
        config = msgspec.convert(loaded, type=ClassificationConfig)
    except msgspec.ValidationError as exc:
        raise ClassificationConfigError([f"schema validation failed: {exc}"]) from exc

    issues = [
        f"type rule for {rule.event_type} has no keywords"
        for rule in config.type_rules
        if not rule.keywords
    ]
    if config.sales.medium > config.sales.high:
        issues.append("sales.medium must not exceed sales.high")
    if issues:
        raise ClassificationConfigError(issues)
    return config
