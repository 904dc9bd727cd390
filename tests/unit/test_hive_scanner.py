"""Unit tests for the private registry hive scanner.

These tests use FakeRegistryKey and FakeHiveLoader from conftest.py and do
not require Windows.
"""

from __future__ import annotations

import sys
import threading

import pytest
from conftest import FakeHiveLoader, FakeRegistryKey, vs_hive

from recent_workspaces.errors import DiscoveryCancelled
from recent_workspaces.registry import HiveScanResult, RegistryHiveScanner, load_app_hive

HIVE = r"C:\Users\dev\AppData\Local\Microsoft\VisualStudio\17.0_abc\privateregistry.bin"


@pytest.fixture
def solutions(fake_fs):
    fake_fs.add_file(r"C:\proj\one.sln")
    fake_fs.add_file(r"C:\proj\two.sln")
    fake_fs.add_file(r"D:\y\z.sln")
    return fake_fs


def scanner_for(fs, root: FakeRegistryKey | None) -> tuple[RegistryHiveScanner, FakeHiveLoader]:
    loader = FakeHiveLoader({HIVE: root} if root is not None else {})
    return RegistryHiveScanner(fs=fs, hive_loader=loader), loader


def test_missing_hive_returns_empty_result(fake_fs):
    scanner, loader = scanner_for(fake_fs, None)

    assert len(scanner.scan_hive(HIVE)) == 0
    assert scanner.scan(HIVE) == []
    assert loader.loaded == []


def test_array_value_keeps_only_valid_candidates(solutions):
    instance = FakeRegistryKey(
        subkeys={
            "MRUItems": FakeRegistryKey(
                values={
                    "Solutions": [
                        "file:///C:/proj/one.sln",
                        r"C:\proj\two.sln",
                        "file:///C:/proj/%E0%A4%A.sln",
                    ]
                }
            )
        }
    )
    scanner, loader = scanner_for(solutions, vs_hive({"17.0_abc": instance}))

    assert scanner.scan(HIVE) == [r"C:\proj\one.sln", r"C:\proj\two.sln"]
    assert loader.released == [HIVE]


def test_candidates_embedded_in_serialized_blobs(solutions):
    blob = r'{"LocalProperties":{"FullPath":"C:\\proj\\one.sln"},"Source":"file:///D:/y/z.sln"}'
    instance = FakeRegistryKey(subkeys={"StartPage": FakeRegistryKey(values={"Recent": blob})})
    scanner, _ = scanner_for(solutions, vs_hive({"17.0_abc": instance}))

    # URI matches are collected before bare paths within one value
    assert scanner.scan(HIVE) == [r"D:\y\z.sln", r"C:\proj\one.sln"]


def test_mru_keys_are_visited_before_the_exhaustive_walk(solutions):
    instance = FakeRegistryKey(
        subkeys={
            "Other": FakeRegistryKey(values={"a": r"C:\proj\two.sln"}),
            "MRUItems": FakeRegistryKey(values={"b": "file:///C:/proj/one.sln"}),
        }
    )
    scanner, _ = scanner_for(solutions, vs_hive({"17.0_abc": instance}))

    assert scanner.scan(HIVE) == [r"C:\proj\one.sln", r"C:\proj\two.sln"]


def test_only_matching_instance_keys_are_scanned(solutions):
    root = vs_hive(
        {
            "16.0_old": FakeRegistryKey(values={"a": r"C:\proj\one.sln"}),
            "17.0_abc_Config": FakeRegistryKey(values={"b": r"C:\proj\two.sln"}),
        }
    )
    scanner, _ = scanner_for(solutions, root)

    assert scanner.scan(HIVE) == [r"C:\proj\two.sln"]


def test_non_solution_missing_and_non_string_values_are_dropped(solutions):
    instance = FakeRegistryKey(
        values={
            "readme": r"C:\proj\readme.txt",
            "gone": r"C:\proj\deleted.sln",
            "count": 3,
            "blob": b"C:\\proj\\one.sln",
            "suffix": r"C:\proj\two.sln  (pinned)",
            "query": "file:///C:/proj/one.sln?line=4",
        }
    )
    scanner, _ = scanner_for(solutions, vs_hive({"17.0_abc": instance}))

    assert scanner.scan(HIVE) == [r"C:\proj\two.sln", r"C:\proj\one.sln"]


def test_extension_match_is_case_insensitive(fake_fs):
    fake_fs.add_file(r"C:\Proj\Big.SLN")
    instance = FakeRegistryKey(values={"a": r"c:\proj\big.sln"})
    scanner, _ = scanner_for(fake_fs, vs_hive({"17.0_abc": instance}))

    assert scanner.scan(HIVE) == [r"C:\proj\big.sln"]


def test_failing_keys_are_skipped_and_siblings_still_read(solutions):
    instance = FakeRegistryKey(
        subkeys={
            "Broken": FakeRegistryKey(values={"a": r"C:\proj\one.sln"}, fail_values=True),
            "Opaque": FakeRegistryKey(
                values={"b": r"C:\proj\two.sln"},
                subkeys={"Hidden": FakeRegistryKey(values={"c": r"D:\y\z.sln"})},
                fail_enum=True,
            ),
            "Fine": FakeRegistryKey(values={"d": "file:///D:/y/z.sln"}),
        }
    )
    scanner, _ = scanner_for(solutions, vs_hive({"17.0_abc": instance}))

    assert scanner.scan(HIVE) == [r"C:\proj\two.sln", r"D:\y\z.sln"]


def test_deep_trees_do_not_hit_the_recursion_limit(solutions):
    instance = FakeRegistryKey()
    node = instance
    for level in range(1500):
        node = node.add(f"k{level}", FakeRegistryKey())
    node._values["deep"] = r"C:\proj\one.sln"
    scanner, _ = scanner_for(solutions, vs_hive({"17.0_abc": instance}))

    assert scanner.scan(HIVE) == [r"C:\proj\one.sln"]


def test_hive_is_released_when_the_walk_raises(solutions):
    class Exploding(FakeRegistryKey):
        def values(self):
            raise RuntimeError("unexpected")

    scanner, loader = scanner_for(solutions, vs_hive({"17.0_abc": Exploding()}))

    with pytest.raises(RuntimeError):
        scanner.scan_hive(HIVE)
    assert loader.released == [HIVE]


def test_cancellation_stops_the_walk_and_releases_the_hive(solutions):
    cancel = threading.Event()
    cancel.set()
    instance = FakeRegistryKey(values={"a": r"C:\proj\one.sln"})
    scanner, loader = scanner_for(solutions, vs_hive({"17.0_abc": instance}))

    with pytest.raises(DiscoveryCancelled):
        scanner.scan_hive(HIVE, cancel_event=cancel)
    assert loader.released == [HIVE]


def test_settings_file_is_scanned_as_plain_text(solutions):
    settings = r"C:\vs\ApplicationPrivateSettings.xml"
    solutions.add_file(
        settings,
        '<collection name="CodeContainers.Offline">'
        '<value name="value">[{"Key":"C:\\\\proj\\\\one.sln"},{"Key":"file:///D:/y/z.sln"}]</value>'
        "</collection>",
    )
    scanner, _ = scanner_for(solutions, None)

    assert scanner.scan(None, settings) == [r"D:\y\z.sln", r"C:\proj\one.sln"]


def test_unreadable_settings_file_contributes_nothing(solutions):
    settings = r"C:\vs\ApplicationPrivateSettings.xml"
    solutions.add_file(settings, r"C:\proj\one.sln")
    solutions.make_unreadable(settings)
    scanner, _ = scanner_for(solutions, None)

    assert len(scanner.scan_text_file(settings)) == 0


def test_hive_and_settings_results_merge_without_duplicates(solutions):
    settings = r"C:\vs\ApplicationPrivateSettings.xml"
    solutions.add_file(settings, r"<v>C:\PROJ\ONE.sln</v><v>C:\proj\two.sln</v>")
    instance = FakeRegistryKey(values={"a": "file:///c:/proj/one.sln"})
    scanner, _ = scanner_for(solutions, vs_hive({"17.0_abc": instance}))

    assert scanner.scan(HIVE, settings) == [r"C:\proj\one.sln", r"C:\proj\two.sln"]


def test_scan_result_keeps_insertion_order():
    result = HiveScanResult()
    for item in ["b", "a", "b", "", "c"]:
        result.add(item)

    assert list(result) == ["b", "a", "c"]
    assert "a" in result


@pytest.mark.skipif(sys.platform == "win32", reason="hives only load on Windows")
def test_default_loader_yields_nothing_off_windows(fake_fs):
    with load_app_hive(HIVE) as root:
        assert root is None

    assert RegistryHiveScanner(fs=fake_fs).scan(HIVE) == []


@pytest.mark.parametrize(
    "value",
    [
        r"C:\proj\one.sln D:\y\z.sln",
        r"C:\proj\one.sln;D:\y\z.sln",
        r"C:\proj\one.sln,D:\y\z.sln",
        "file:///C:/proj/one.sln;file:///D:/y/z.sln",
    ],
)
def test_every_entry_of_a_delimited_list_is_kept(solutions, value):
    instance = FakeRegistryKey(values={"list": value})
    scanner, _ = scanner_for(solutions, vs_hive({"17.0_abc": instance}))

    assert scanner.scan(HIVE) == [r"C:\proj\one.sln", r"D:\y\z.sln"]


def test_uri_in_xml_element_text(solutions):
    settings = r"C:\vs\ApplicationPrivateSettings.xml"
    solutions.add_file(settings, "<value>file:///D:/y/z.sln</value><value>C:\\proj\\one.sln</value>")
    scanner, _ = scanner_for(solutions, None)

    assert scanner.scan(None, settings) == [r"D:\y\z.sln", r"C:\proj\one.sln"]
