import json

import pytest

from debtradar.deps import map_audit_severity, scan_dependencies
from debtradar.utils import CommandError

AUDIT = {
    "auditReportVersion": 2,
    "vulnerabilities": {
        "lodash": {
            "name": "lodash",
            "severity": "critical",
            "via": [{"title": "Prototype Pollution in lodash"}, {"title": "ReDoS"}],
        },
        "minimist": {"name": "minimist", "severity": "moderate", "via": [{"title": "Prototype pollution"}]},
        "wrapper": {"name": "wrapper", "severity": "high", "via": ["lodash"]},
        "odd": {"name": "odd", "severity": "info", "via": []},
    },
}


class Runner:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def __call__(self, cmd, cwd=None, timeout=None):
        self.calls.append((cmd, cwd, timeout))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture()
def project(workspace):
    return workspace({"package.json": '{"name": "demo"}'})


@pytest.mark.parametrize(
    "raw,expected",
    [("critical", "critical"), ("HIGH", "high"), ("moderate", "medium"), ("low", "low"), ("info", "low"), (None, "low")],
)
def test_severity_mapping(raw, expected):
    assert map_audit_severity(raw) == expected


def test_no_manifest_is_a_noop(tmp_path):
    runner = Runner(json.dumps(AUDIT))
    assert scan_dependencies(str(tmp_path), runner=runner) == []
    assert runner.calls == []


def test_maps_one_item_per_vulnerable_package(project):
    runner = Runner(json.dumps(AUDIT))
    items = scan_dependencies(str(project), runner=runner)

    assert runner.calls == [(["npm", "audit", "--json"], str(project), 10)]
    by_msg = {it.message: it for it in items}
    assert set(by_msg) == {
        "lodash: Prototype Pollution in lodash",
        "minimist: Prototype pollution",
        "wrapper: Vulnerability detected",
        "odd: Vulnerability detected",
    }
    assert by_msg["lodash: Prototype Pollution in lodash"].severity == "critical"
    assert by_msg["minimist: Prototype pollution"].severity == "medium"
    assert by_msg["wrapper: Vulnerability detected"].severity == "high"
    for it in items:
        assert it.kind == "dep"
        assert it.file == "package.json"
        assert it.line is None


def test_ids_depend_on_package_and_title(project):
    first = scan_dependencies(str(project), runner=Runner(json.dumps(AUDIT)))
    second = scan_dependencies(str(project), runner=Runner(json.dumps(AUDIT)))
    assert [it.id for it in first] == [it.id for it in second]
    assert len({it.id for it in first}) == len(first)


@pytest.mark.parametrize(
    "result",
    [
        CommandError("npm timed out after 10s"),
        CommandError("npm audit --json exited with 1"),
        "not json at all",
        "[1, 2, 3]",
        '{"vulnerabilities": ["nope"]}',
    ],
)
def test_audit_failures_yield_nothing(project, result):
    assert scan_dependencies(str(project), runner=Runner(result)) == []


def test_clean_audit(project):
    assert scan_dependencies(str(project), runner=Runner('{"vulnerabilities": {}}')) == []
