from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Dict, List, Optional
from urllib.parse import unquote, urlparse

from ..syntax.diagnostics import SourceSpan
from ..syntax.parser import TEMPLATE_ID_SUFFIX, ParseResult, parse

logger = logging.getLogger(__name__)

TEMPLATE_EXTENSION = ".collie"


@dataclass(frozen=True)
class TemplateIdEntry:
    id: str
    uri: str
    raw_id: Optional[str] = None
    id_span: Optional[SourceSpan] = None
    derived_from_filename: bool = False


@dataclass(frozen=True)
class _CacheEntry:
    version: int
    parsed: ParseResult


def logical_id_from_html_id(html_id: str) -> str:
    """`profile-card-collie` → `profile-card`; other ids pass through."""
    if html_id.endswith(TEMPLATE_ID_SUFFIX):
        return html_id[: -len(TEMPLATE_ID_SUFFIX)]
    return html_id


def template_id_from_uri(uri: str) -> str:
    """Template id derived from the file name of a document URI."""
    path = unquote(urlparse(uri).path) if "://" in uri else uri
    name = PurePosixPath(path.replace("\\", "/")).name
    if name.endswith(TEMPLATE_EXTENSION):
        name = name[: -len(TEMPLATE_EXTENSION)]
    return logical_id_from_html_id(name)


class DocumentCache:
    """
    Parse results per document, reused while the document version is unchanged.

    Also maintains an index from template id to the documents declaring it.
    The id is the `#id` directive when present, otherwise the file name.
    Several documents may claim the same id; all of them are listed.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _CacheEntry] = {}
        self._template_ids: Dict[str, List[TemplateIdEntry]] = {}

    def get(self, uri: str, version: int, text: str) -> ParseResult:
        cached = self._entries.get(uri)
        if cached is not None and cached.version == version:
            return cached.parsed

        logger.debug("Parsing %s (version %s)", uri, version)
        parsed = parse(text)
        self._entries[uri] = _CacheEntry(version=version, parsed=parsed)
        self._reindex(uri, parsed)
        return parsed

    def invalidate(self, uri: str) -> None:
        self._entries.pop(uri, None)
        self._drop_from_index(uri)

    def clear(self) -> None:
        self._entries.clear()
        self._template_ids.clear()

    def __contains__(self, uri: str) -> bool:
        return uri in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    # ---------------------------- template ids ---------------------------- #

    def template_entries(self, template_id: str) -> List[TemplateIdEntry]:
        return list(self._template_ids.get(template_id, ()))

    def all_template_ids(self) -> Dict[str, List[TemplateIdEntry]]:
        return {key: list(entries) for key, entries in self._template_ids.items()}

    def _reindex(self, uri: str, parsed: ParseResult) -> None:
        self._drop_from_index(uri)

        root = parsed.root
        if root.id:
            entry = TemplateIdEntry(id=root.id, uri=uri, raw_id=root.raw_id, id_span=root.id_span)
        else:
            entry = TemplateIdEntry(id=template_id_from_uri(uri), uri=uri, derived_from_filename=True)

        self._template_ids.setdefault(entry.id, []).append(entry)

    def _drop_from_index(self, uri: str) -> None:
        for template_id in list(self._template_ids):
            kept = [entry for entry in self._template_ids[template_id] if entry.uri != uri]
            if kept:
                self._template_ids[template_id] = kept
            else:
                del self._template_ids[template_id]


__all__ = [
    "DocumentCache",
    "TemplateIdEntry",
    "logical_id_from_html_id",
    "template_id_from_uri",
]
