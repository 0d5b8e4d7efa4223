"""
Pytest configuration for the equimutant test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Temp directories
- Sample Java sources, parsed trees and indexes
- Transform registry fixtures
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from equimutant.logging_config import reset_logging, setup_logging


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Run every test in machine mode."""
    os.environ.setdefault("EQUIMUTANT_MACHINE_MODE", "1")
    reset_logging()
    setup_logging(level="DEBUG", suppress_console=True)


# ============================================================================
# SAMPLE SOURCES
# ============================================================================

CALCULATOR_SOURCE = """public class Calculator {
    private int total = 0;
    private boolean enabled = true;

    public int add(int a, int b) {
        int sum = a + b;
        total = sum;
        if (enabled) {
            total = total + 1;
        }
        return total;
    }

    public void reset() {
        total = 0;
    }
}
"""

FLOW_SOURCE = """public class Flow {
    private int base = 10;

    int compute(int input) {
        int a = input * 2;
        int b = a + base;
        int unused = 7;
        return b;
    }
}
"""

FLAGS_SOURCE = """public class Flags {
    public void run() {
        int x = 1;
        if (true) {
            x = 2;
        }
    }
}
"""

BROKEN_SOURCE = """public class Broken {
    void m() {
        int x = ;
    }
"""


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="equimutant_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def output_dir(temp_dir):
    """Mutant output directory (not created yet)."""
    return temp_dir / "out"


@pytest.fixture
def calculator_file(temp_dir):
    path = temp_dir / "Calculator.java"
    path.write_text(CALCULATOR_SOURCE, encoding="utf-8")
    return path


@pytest.fixture
def broken_file(temp_dir):
    path = temp_dir / "Broken.java"
    path.write_text(BROKEN_SOURCE, encoding="utf-8")
    return path


# ============================================================================
# TREE / INDEX FIXTURES
# ============================================================================

@pytest.fixture
def calculator_tree():
    from equimutant.parser import parse_source
    return parse_source(CALCULATOR_SOURCE, file_path="Calculator.java")


@pytest.fixture
def calculator_index(calculator_tree):
    from equimutant.index import build_index
    return build_index(calculator_tree)


@pytest.fixture
def flow_index():
    from equimutant.index import build_index
    from equimutant.parser import parse_source
    return build_index(parse_source(FLOW_SOURCE, file_path="Flow.java"))


@pytest.fixture
def flags_index():
    from equimutant.index import build_index
    from equimutant.parser import parse_source
    return build_index(parse_source(FLAGS_SOURCE, file_path="Flags.java"))


# ============================================================================
# REGISTRY FIXTURES
# ============================================================================

@pytest.fixture
def default_registry():
    from equimutant.transform import TransformRegistry
    return TransformRegistry.default()


@pytest.fixture
def engine_config():
    """Engine overrides that keep tests independent of user config files."""
    return {"max_workers": 1, "default_random_count": 5, "mutant_extension": ".java"}


def node_on_line(index, line, text=None):
    """First primary node starting on `line` (optionally with exactly `text`)."""
    for node in index.all_nodes:
        if node.line == line and (text is None or node.text == text):
            return node
    raise AssertionError(f"no primary node on line {line}")
