import copy

import pytest
from fastapi.testclient import TestClient

from compatgate.api.main import app
from compatgate.core.declarations import load_declarations
from compatgate.core.evaluator import CompatibilityEvaluator

HOST = "//host:platform"
PKG = "//target_skipping"

TARGET_SKIPPING = {
    "package": PKG,
    "constraint_settings": ["foo_version", "bar_version"],
    "constraint_values": [
        {"name": "foo1", "constraint_setting": ":foo_version"},
        {"name": "foo2", "constraint_setting": ":foo_version"},
        {"name": "foo3", "constraint_setting": ":foo_version"},
        {"name": "bar1", "constraint_setting": "bar_version"},
        {"name": "bar2", "constraint_setting": "bar_version"},
    ],
    "platforms": [
        {"name": HOST},
        {"name": "foo1_bar1_platform", "parents": [HOST], "constraint_values": [":foo1", ":bar1"]},
        {"name": "foo2_bar1_platform", "parents": [HOST], "constraint_values": [":foo2", ":bar1"]},
        {"name": "foo2_bar2_platform", "parents": [HOST], "constraint_values": [":foo2", ":bar2"]},
        {"name": "foo3_platform", "parents": [HOST], "constraint_values": [":foo3"]},
        {"name": "bar1_platform", "parents": [HOST], "constraint_values": [":bar1"]},
    ],
    "targets": [
        {
            "name": "pass_on_foo1_or_foo2_but_not_on_foo3",
            "target_compatible_with": [{"any_of": [":foo1", ":foo2"]}],
        },
        {
            "name": "pass_on_everything_but_foo1_and_foo2",
            "target_compatible_with": [{"none_of": [":foo1", ":foo2"]}],
        },
        {
            "name": "pass_on_only_foo1_and_bar1",
            "target_compatible_with": [{"all_of": [":foo1", ":bar1"]}],
        },
        {
            "name": "pass_on_foo1_or_foo2_but_not_bar1",
            "target_compatible_with": [{"any_of": [":foo1", ":foo2"]}, {"none_of": [":bar1"]}],
        },
        {"name": "always_compatible"},
    ],
}


@pytest.fixture()
def declarations_doc():
    return copy.deepcopy(TARGET_SKIPPING)


@pytest.fixture()
def declarations(declarations_doc):
    return load_declarations(declarations_doc)


@pytest.fixture()
def model(declarations):
    return declarations.model


@pytest.fixture()
def evaluator(model):
    return CompatibilityEvaluator(model)


@pytest.fixture()
def client():
    return TestClient(app)
