"""
Domain Model Loader

Converts a raw JSON document into the immutable TimelineDocument contract.

TOLERANCE:
==========
Schema validation is a separate step; the loader itself never raises on
missing optional fields. Absent arrays become empty tuples, absent scalars
become None, unknown element types are skipped with a warning.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

from ..contracts.base import ElementType, Error, ErrorCode, Result
from ..contracts.timeline import (
    Actor, Attachment, Command, CommandOutcome, CommandScenario, Event,
    EventReference, Specification, StateView, StateViewScenario,
    TimelineDocument, TimelineElement,
)
from .validation import validate_document

logger = logging.getLogger(__name__)


# =============================================================================
# FIELD HELPERS
# =============================================================================

def _seq(value: Any) -> Tuple[Any, ...]:
    """A JSON array as a tuple; anything else as empty."""
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return ()


def _str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _tick(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


# =============================================================================
# SCENARIOS
# =============================================================================

def _event_refs(value: Any) -> Tuple[EventReference, ...]:
    refs = []
    for raw in _seq(value):
        raw = _mapping(raw)
        if _str(raw.get('event')):
            refs.append(EventReference(event=raw['event'], data=raw.get('data')))
    return tuple(refs)


def parse_command_scenario(raw: Mapping) -> CommandScenario:
    then = _mapping(raw.get('then'))
    return CommandScenario(
        name=_str(raw.get('name')) or "",
        given=_event_refs(raw.get('given')),
        when=raw.get('when'),
        then=CommandOutcome(
            produces=_event_refs(then.get('produces')),
            fails=_str(then.get('fails')),
        ),
    )


def parse_state_scenario(raw: Mapping) -> StateViewScenario:
    return StateViewScenario(
        name=_str(raw.get('name')) or "",
        given=_event_refs(raw.get('given')),
        then=raw.get('then'),
    )


def _attachments(value: Any) -> Tuple[Attachment, ...]:
    attachments = []
    for raw in _seq(value):
        raw = _mapping(raw)
        attachments.append(Attachment(
            kind=_str(raw.get('type')) or "note",
            label=_str(raw.get('label')) or "",
            path=_str(raw.get('path')),
            url=_str(raw.get('url')),
            content=_str(raw.get('content')),
        ))
    return tuple(attachments)


# =============================================================================
# ELEMENTS
# =============================================================================

def parse_element(raw: Mapping) -> Optional[TimelineElement]:
    """Parse one timeline element; None for an unknown type."""
    raw = _mapping(raw)
    kind = raw.get('type')
    name = _str(raw.get('name')) or ""
    tick = _tick(raw.get('tick'))

    if kind == ElementType.EVENT.value:
        return Event(
            name=name,
            tick=tick,
            produced_by=_str(raw.get('producedBy')),
            external_source=_str(raw.get('externalSource')),
            system=_str(raw.get('system')),
            example=raw.get('example'),
        )
    if kind == ElementType.STATE.value:
        return StateView(
            name=name,
            tick=tick,
            sourced_from=tuple(s for s in _seq(raw.get('sourcedFrom')) if isinstance(s, str)),
            example=raw.get('example'),
            scenarios=tuple(parse_state_scenario(_mapping(s)) for s in _seq(raw.get('scenarios'))),
            attachments=_attachments(raw.get('attachments')),
        )
    if kind == ElementType.COMMAND.value:
        return Command(
            name=name,
            tick=tick,
            example=raw.get('example'),
            scenarios=tuple(parse_command_scenario(_mapping(s)) for s in _seq(raw.get('scenarios'))),
            attachments=_attachments(raw.get('attachments')),
        )
    if kind == ElementType.ACTOR.value:
        return Actor(
            name=name,
            tick=tick,
            reads_view=_str(raw.get('readsView')) or "",
            sends_command=_str(raw.get('sendsCommand')) or "",
            role=_str(raw.get('role')),
            wireframes=tuple(w for w in _seq(raw.get('wireframes')) if isinstance(w, str)),
        )

    logger.warning("skipping timeline element %r with unknown type %r", name, kind)
    return None


def parse_specification(raw: Mapping) -> Optional[Specification]:
    raw = _mapping(raw)
    kind = raw.get('type')
    if kind == ElementType.COMMAND.value:
        parse = parse_command_scenario
    elif kind == ElementType.STATE.value:
        parse = parse_state_scenario
    else:
        logger.warning("skipping specification %r with unknown type %r", raw.get('name'), kind)
        return None

    return Specification(
        name=_str(raw.get('name')) or "",
        type=ElementType(kind),
        scenarios=tuple(parse(_mapping(s)) for s in _seq(raw.get('scenarios'))),
    )


# =============================================================================
# DOCUMENT
# =============================================================================

def load_document(data: Any) -> TimelineDocument:
    """Build a TimelineDocument from a parsed JSON value."""
    data = _mapping(data)

    timeline = tuple(
        element for element in (parse_element(raw) for raw in _seq(data.get('timeline')))
        if element is not None
    )
    specifications = tuple(
        spec for spec in (parse_specification(raw) for raw in _seq(data.get('specifications')))
        if spec is not None
    )

    document = TimelineDocument(
        name=_str(data.get('name')) or "",
        timeline=timeline,
        description=_str(data.get('description')),
        version=_str(data.get('version')),
        specifications=specifications,
    )
    logger.debug(
        "loaded %r: %d elements, %d specifications",
        document.name, len(timeline), len(specifications),
    )
    return document


def read_document_file(path: Union[str, Path]) -> Result:
    """
    Read a document file as raw JSON.

    Returns Result.success(parsed JSON) or a failure carrying
    SOURCE_UNREACHABLE (missing or unreadable) or MALFORMED_PAYLOAD.
    """
    file_path = Path(path)
    if not file_path.is_file():
        return Result.failure(Error(
            code=ErrorCode.SOURCE_UNREACHABLE,
            message=f"File not found: {file_path}",
        ))

    try:
        with open(file_path, 'r', encoding='utf-8') as handle:
            data = json.load(handle)
    except json.JSONDecodeError as err:
        return Result.failure(Error(
            code=ErrorCode.MALFORMED_PAYLOAD,
            message=f"Invalid JSON in {file_path}: {err.msg} (line {err.lineno})",
        ))
    except UnicodeDecodeError as err:
        return Result.failure(Error(
            code=ErrorCode.MALFORMED_PAYLOAD,
            message=f"{file_path} is not UTF-8 text: {err.reason}",
        ))
    except OSError as err:
        return Result.failure(Error(
            code=ErrorCode.SOURCE_UNREACHABLE,
            message=f"Cannot read {file_path}: {err.strerror or err}",
        ))

    return Result.success(data)


def load_document_file(path: Union[str, Path], validate: bool = True) -> Result:
    """
    Read, optionally validate, and load a document file.

    Returns Result.success(TimelineDocument) or a failure carrying
    SOURCE_UNREACHABLE, MALFORMED_PAYLOAD or SCHEMA_VIOLATION.
    Schema violations are attached as ("issue", "path: message") context.
    """
    result = read_document_file(path)
    if result.is_failure:
        return result
    data = result.value

    if validate:
        issues = validate_document(data)
        if issues:
            error = Error(
                code=ErrorCode.SCHEMA_VIOLATION,
                message=f"Schema validation failed with {len(issues)} error(s)",
            )
            for issue in issues:
                error = error.with_context("issue", str(issue))
            return Result.failure(error)

    return Result.success(load_document(data))
