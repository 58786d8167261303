"""
Shared test fixtures and configuration.

Most tests need real importable classes. ``make_package`` writes a
throw-away package under a temporary import root; every module imported
from (or generated into) the temporary directory is dropped from
``sys.modules`` after the test, and ``sys.path`` is restored.
"""

import sys
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

SHOP_MODELS = """\
    from __future__ import annotations

    import abc
    import enum
    from dataclasses import dataclass
    from typing import Protocol, TypedDict


    class Person:
        def __init__(self, name: str = "", age: int = 0):
            self._name = name
            self._age = age

        def get_name(self) -> str:
            return self._name

        def set_name(self, name: str) -> None:
            self._name = name

        def get_age(self) -> int:
            return self._age


    class Empty:
        pass


    @dataclass
    class Address:
        street: str = ""
        city: str = ""


    class Greeter(Protocol):
        def greet(self) -> str: ...


    class Shape(abc.ABC):
        @abc.abstractmethod
        def area(self) -> float: ...


    class Color(enum.Enum):
        RED = 1


    class Point(TypedDict):
        x: int


    class NeedsArgs:
        def __init__(self, value: int):
            self.value = value
"""


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def bean_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Temporary import root, on sys.path for the duration of the test."""
    root = tmp_path / "beans"
    root.mkdir()
    monkeypatch.syspath_prepend(str(root))
    before = set(sys.modules)

    yield root

    prefix = str(tmp_path)
    for name in set(sys.modules) - before:
        module_file = getattr(sys.modules[name], "__file__", None) or ""
        if module_file.startswith(prefix):
            del sys.modules[name]


@pytest.fixture
def make_package(bean_root: Path) -> Callable[..., Path]:
    """Factory writing ``{module: source}`` into a package under bean_root."""

    def _make(name: str, modules: dict[str, str], init: str = "") -> Path:
        parts = name.split(".")
        for depth in range(1, len(parts) + 1):
            directory = bean_root.joinpath(*parts[:depth])
            directory.mkdir(exist_ok=True)
            if not (directory / "__init__.py").exists():
                (directory / "__init__.py").write_text("")
        package_dir = bean_root.joinpath(*parts)
        (package_dir / "__init__.py").write_text(textwrap.dedent(init))
        for module, source in modules.items():
            (package_dir / f"{module}.py").write_text(textwrap.dedent(source))
        return package_dir

    return _make


@pytest.fixture
def shop(make_package: Callable[..., Path]) -> Path:
    """The ``shop`` package with a ``models`` module of assorted classes."""
    return make_package("shop", {"models": SHOP_MODELS})


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    """Directory generated matchers are written under."""
    return tmp_path / "generated"
