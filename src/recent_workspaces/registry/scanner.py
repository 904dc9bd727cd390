"""Pattern-based extraction of project references from private hives.

Visual Studio's private registry layout shifts between releases and most of
its interesting values are serialized blobs (JSON fragments, delimited MRU
lists) rather than clean paths.  The scanner therefore does not parse any of
it.  It walks every string and multi-string value under the instance keys,
runs two regular expressions over the text (``file:///X:/...`` URIs and bare
``X:\\...`` paths) and keeps whatever looks like a project file that still
exists.  The adjacent ``ApplicationPrivateSettings.xml`` is treated the same
way, as unstructured text.

Scanning never raises.  A failing key, value or file contributes nothing and
the walk moves on.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable, Iterator, Sequence

from ..constants import VS_HIVE_ROOT, VS_INSTANCE_PREFIX, VS_MRU_SUBKEYS
from ..errors import DiscoveryCancelled
from ..paths.filesystem import LOCAL_FS, FileSystem
from ..paths.normalizer import canonicalize, file_uri_to_path
from .hive import HiveLoader, RegistryKey, load_app_hive

logger = logging.getLogger(__name__)

# Both extractors stop where the next candidate of a delimited list begins
FILE_URI_PATTERN = re.compile(r"file:///[A-Za-z]:/(?:(?!file:)[^\"\s<>])+", re.IGNORECASE)
WINDOWS_PATH_PATTERN = re.compile(r"[A-Za-z]:\\(?:(?![A-Za-z]:\\)[^:*?\"<>|\r\n])+")
SOLUTION_PATTERN = re.compile(r"\.sln(?=$|[?\"\s;,<>|])", re.IGNORECASE)


class HiveScanResult:
    """Ordered set of raw candidate strings collected during one scan."""

    def __init__(self) -> None:
        self._items: dict[str, None] = {}

    def add(self, candidate: str) -> None:
        if candidate:
            self._items.setdefault(candidate, None)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, candidate: object) -> bool:
        return candidate in self._items


class RegistryHiveScanner:
    """Extract project-file paths from a private hive and its settings file."""

    def __init__(
        self,
        fs: FileSystem = LOCAL_FS,
        hive_loader: HiveLoader = load_app_hive,
        log: logging.Logger | None = None,
        *,
        root_path: str = VS_HIVE_ROOT,
        instance_prefix: str = VS_INSTANCE_PREFIX,
        mru_subkeys: Sequence[str] = VS_MRU_SUBKEYS,
        project_pattern: re.Pattern[str] = SOLUTION_PATTERN,
    ) -> None:
        self.fs = fs
        self.hive_loader = hive_loader
        self.root_path = root_path
        self.instance_prefix = instance_prefix
        self.mru_subkeys = tuple(mru_subkeys)
        self.project_pattern = project_pattern
        self._logger = log or logger

    # -- raw extraction -------------------------------------------------

    def collect_from_string(self, text: str, sink: HiveScanResult) -> None:
        """Add every URI-shaped and path-shaped substring of ``text`` to ``sink``."""
        for match in FILE_URI_PATTERN.finditer(text):
            sink.add(match.group(0))
        for match in WINDOWS_PATH_PATTERN.finditer(text):
            sink.add(match.group(0))

    def _collect_value(self, data: object, sink: HiveScanResult) -> None:
        if isinstance(data, str):
            self.collect_from_string(data, sink)
        elif isinstance(data, (list, tuple)):
            for item in data:
                if isinstance(item, str):
                    self.collect_from_string(item, sink)

    def scan_hive(
        self,
        hive_path: str,
        sink: HiveScanResult | None = None,
        cancel_event: threading.Event | None = None,
    ) -> HiveScanResult:
        """Load ``hive_path`` and collect raw candidates from every instance key.

        A missing or unloadable hive yields an empty result.  When
        ``cancel_event`` fires mid-walk, ``DiscoveryCancelled`` is raised after
        the hive has been released.
        """
        result = sink if sink is not None else HiveScanResult()
        try:
            with self.hive_loader(hive_path) as root:
                if root is None:
                    self._logger.debug("No hive data available at %s", hive_path)
                    return result
                self._scan_root(root, result, cancel_event)
        except DiscoveryCancelled:
            raise
        except OSError as exc:
            self._logger.debug("Hive scan of %s aborted: %s", hive_path, exc)
        self._logger.debug("Hive %s yielded %d raw candidates", hive_path, len(result))
        return result

    def _scan_root(self, root: RegistryKey, sink: HiveScanResult, cancel_event: threading.Event | None) -> None:
        product = root.open_subkey(self.root_path)
        if product is None:
            return
        try:
            try:
                names = product.subkey_names()
            except OSError:
                return
            prefix = self.instance_prefix.casefold()
            for name in names:
                if not name.casefold().startswith(prefix):
                    continue
                instance = product.open_subkey(name)
                if instance is None:
                    continue
                try:
                    for known in self.mru_subkeys:
                        self.walk(instance, sink, cancel_event, start=known)
                    self.walk(instance, sink, cancel_event)
                finally:
                    instance.close()
        finally:
            product.close()

    def walk(
        self,
        key: RegistryKey,
        sink: HiveScanResult,
        cancel_event: threading.Event | None = None,
        start: str = "",
    ) -> None:
        """Depth-first walk of ``key`` (or its ``start`` subpath) collecting values.

        The walk keeps an explicit stack of relative paths so that arbitrarily
        deep trees cannot exhaust the interpreter's recursion limit, and holds
        at most one child handle open at a time.  Keys that fail to open or
        enumerate are skipped.
        """
        stack = [start]
        while stack:
            if cancel_event is not None and cancel_event.is_set():
                raise DiscoveryCancelled()
            path = stack.pop()
            node = key.open_subkey(path) if path else key
            if node is None:
                continue
            try:
                self._read_values(node, sink)
                try:
                    children = node.subkey_names()
                except OSError as exc:
                    self._logger.debug("Cannot enumerate %r: %s", path, exc)
                    continue
                prefix = f"{path}\\" if path else ""
                stack.extend(prefix + child for child in reversed(children))
            finally:
                if node is not key:
                    node.close()

    def _read_values(self, node: RegistryKey, sink: HiveScanResult) -> None:
        try:
            for _name, data in node.values():
                self._collect_value(data, sink)
        except OSError as exc:
            self._logger.debug("Cannot read values: %s", exc)

    def scan_text_file(self, path: str, sink: HiveScanResult | None = None) -> HiveScanResult:
        """Collect raw candidates from a loosely structured text/XML file."""
        result = sink if sink is not None else HiveScanResult()
        try:
            text = self.fs.read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            self._logger.debug("Cannot read %s: %s", path, exc)
            return result
        self.collect_from_string(text, result)
        return result

    # -- post-extraction ------------------------------------------------

    def to_project_path(self, raw: str) -> str | None:
        """Turn one raw candidate into a canonical project path, or ``None``.

        The string is trimmed and unquoted, URI-decoded when it is a
        ``file:`` URI, cut right after the project extension (values often
        carry trailing text) and kept only if that file exists.
        """
        candidate = raw.strip().strip('"').strip()
        if not candidate:
            return None
        pathmod = self.fs.pathmod
        if candidate[:8].lower() == "file:///":
            converted = file_uri_to_path(candidate, pathmod)
            if converted is None:
                return None
            candidate = converted
        match = self.project_pattern.search(candidate)
        if match is None:
            return None
        candidate = canonicalize(candidate[: match.end()], pathmod)
        if not self.fs.is_file(candidate):
            return None
        return candidate

    def finalize(self, candidates: Iterable[str]) -> list[str]:
        """Normalize, filter and deduplicate (case-insensitively) raw candidates."""
        seen: set[str] = set()
        paths: list[str] = []
        for raw in candidates:
            path = self.to_project_path(raw)
            if path is None:
                continue
            key = path.casefold()
            if key in seen:
                continue
            seen.add(key)
            paths.append(path)
        return paths

    def scan(
        self,
        hive_path: str | None,
        settings_path: str | None = None,
        cancel_event: threading.Event | None = None,
    ) -> list[str]:
        """Scan one hive and its settings file and return existing project paths."""
        result = HiveScanResult()
        if hive_path:
            self.scan_hive(hive_path, result, cancel_event)
        if settings_path:
            self.scan_text_file(settings_path, result)
        return self.finalize(result)
