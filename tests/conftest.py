import os
import sys

import pytest

# Enable wire guards in tests unless explicitly overridden.
os.environ.setdefault("INET_TEST_GUARDS", "1")

import jax

# Ensure src/ and the repo root are importable without an editable install.
ROOT = os.path.dirname(os.path.dirname(__file__))
for _path in (os.path.join(ROOT, "src"), ROOT):
    if _path not in sys.path:
        sys.path.insert(0, _path)

MILESTONE_MARKERS = {"m1", "m2", "m3"}
_MARKER_DESCRIPTIONS = {
    "m1": "interaction-net graph and tree syntax",
    "m2": "path network",
    "m3": "dense jax export",
}


def _parse_milestone(value):
    if not value:
        return None
    value = value.strip().lower()
    if value.startswith("m"):
        value = value[1:]
    if not value.isdigit():
        raise ValueError(f"invalid milestone: {value!r}")
    return int(value)


def pytest_addoption(parser):
    parser.addoption(
        "--milestone",
        action="store",
        default=os.environ.get("INET_MILESTONE", ""),
        help="run tests up to a milestone (m1-m3)",
    )


def pytest_configure(config):
    for name, desc in _MARKER_DESCRIPTIONS.items():
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture(autouse=True)
def _set_default_device():
    with jax.default_device(jax.devices("cpu")[0]):
        yield


@pytest.fixture
def metrics_on(monkeypatch):
    from inet_core import metrics

    monkeypatch.setenv("INET_BUILD_METRICS", "1")
    metrics.build_metrics_reset()
    yield metrics
    metrics.build_metrics_reset()


def pytest_collection_modifyitems(config, items):
    milestone = _parse_milestone(config.getoption("--milestone"))
    if milestone is None:
        return
    deselected = []
    for item in items:
        markers = [m.name for m in item.iter_markers() if m.name in MILESTONE_MARKERS]
        if not markers:
            continue
        required = max(int(m[1:]) for m in markers)
        if milestone < required:
            deselected.append(item)
    if deselected:
        config.hook.pytest_deselected(items=deselected)
        for item in deselected:
            items.remove(item)
