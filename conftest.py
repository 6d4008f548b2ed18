"""Configures pytest further and shares the PEM key fixtures."""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import pathlib

import pytest

DATA = pathlib.Path(__file__).parent / "tests" / "data"


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip slower tests")
    parser.addoption("--run-extreme", action="store_true", default=False, help="run extreme value extremely slow tests")


def pytest_collection_modifyitems(config, items):
    skipdict = {}
    if config.getoption("--skip-slow"):
        skipdict["slow"] = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    if not config.getoption("--run-extreme"):
        skipdict["extreme"] = pytest.mark.skip(reason="Extreme test: needs --run-extreme option")
    if not skipdict:
        return
    for item in items:
        for k, v in skipdict.items():
            if k in item.keywords:
                item.add_marker(v)


def read_fixture(name: str) -> str:
    return (DATA / name).read_text(encoding="ascii")


@pytest.fixture(scope="session")
def pem_1024() -> str:
    return read_fixture("rsa_1024")


@pytest.fixture(scope="session")
def pem_2048() -> str:
    return read_fixture("rsa_2048")


@pytest.fixture(scope="session")
def pem_other() -> str:
    return read_fixture("rsa_other_1024")


@pytest.fixture(scope="session", params=["rsa_1024", "rsa_1024.p8", "rsa_1024.pub", "rsa_1024.rsapub"])
def pem_any(request) -> tuple[str, str]:
    """Every layout of the 1024-bit fixture, with its file name."""
    return request.param, read_fixture(request.param)
