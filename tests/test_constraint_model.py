import pytest

from compatgate.core.constraints import ConstraintModel, Platform
from compatgate.core.errors import ConfigurationError, CycleError, UnknownConstraintError


def _model() -> ConstraintModel:
    m = ConstraintModel()
    m.add_setting("//p:os")
    m.add_setting("//p:cpu")
    m.add_value("//p:linux", "//p:os")
    m.add_value("//p:windows", "//p:os")
    m.add_value("//p:x86", "//p:cpu")
    m.add_value("//p:arm", "//p:cpu")
    m.add_platform("//p:base", ["//p:linux", "//p:x86"])
    m.add_platform("//p:child", ["//p:arm"], parent="//p:base")
    m.add_platform("//p:grandchild", ["//p:windows"], parent="//p:child")
    return m


def test_setting_tracks_its_values():
    m = _model()
    assert m.setting("//p:os").values == {"//p:linux", "//p:windows"}
    assert m.setting_of("//p:arm").label == "//p:cpu"


def test_resolve_root_platform():
    assert _model().resolve("//p:base") == {"//p:linux", "//p:x86"}


def test_resolve_child_overrides_inherited_setting():
    assert _model().resolve("//p:child") == {"//p:linux", "//p:arm"}


def test_resolve_closest_assignment_wins_across_generations():
    assert _model().resolve("//p:grandchild") == {"//p:windows", "//p:arm"}


def test_resolve_accepts_platform_object():
    m = _model()
    assert m.resolve(m.platform("//p:child")) == m.resolve("//p:child")


def test_resolve_is_memoized_per_platform():
    m = _model()
    first = m.resolve("//p:child")
    assert m.resolve("//p:child") is first


def test_unregistered_platform_object_is_resolved_without_memo():
    m = _model()
    adhoc = Platform(label="//p:base", constraint_values=("//p:windows",))
    assert m.resolve(adhoc) == {"//p:windows"}
    assert m.resolve("//p:base") == {"//p:linux", "//p:x86"}


def test_duplicate_setting_on_one_platform_is_rejected():
    m = _model()
    with pytest.raises(ConfigurationError):
        m.add_platform("//p:bad", ["//p:linux", "//p:windows"])


def test_repeated_value_on_one_platform_is_collapsed():
    m = _model()
    p = m.add_platform("//p:dup", ["//p:linux", "//p:x86", "//p:linux"])
    assert p.constraint_values == ("//p:linux", "//p:x86")
    assert m.resolve("//p:dup") == {"//p:linux", "//p:x86"}


def test_duplicate_declarations_are_rejected():
    m = _model()
    with pytest.raises(ConfigurationError):
        m.add_setting("//p:os")
    with pytest.raises(ConfigurationError):
        m.add_value("//p:linux", "//p:os")
    with pytest.raises(ConfigurationError):
        m.add_platform("//p:base")


def test_value_for_unknown_setting():
    m = _model()
    with pytest.raises(UnknownConstraintError) as exc:
        m.add_value("//p:riscv", "//p:isa")
    assert exc.value.label == "//p:isa"


def test_platform_with_unknown_value():
    m = _model()
    with pytest.raises(UnknownConstraintError):
        m.add_platform("//p:bad", ["//p:nope"])
    with pytest.raises(UnknownConstraintError):
        m.resolve(Platform(label="//p:adhoc", constraint_values=("//p:nope",)))


def test_unknown_parent_fails_resolution():
    m = _model()
    m.add_platform("//p:orphan", ["//p:linux"], parent="//p:missing")
    with pytest.raises(UnknownConstraintError) as exc:
        m.resolve("//p:orphan")
    assert exc.value.kind == "platform"


def test_unknown_platform_label():
    with pytest.raises(UnknownConstraintError):
        _model().resolve("//p:nowhere")


def test_parent_cycle_is_detected():
    m = _model()
    m.add_platform("//p:a", ["//p:linux"], parent="//p:b")
    m.add_platform("//p:b", ["//p:x86"], parent="//p:a")

    with pytest.raises(CycleError) as exc:
        m.resolve("//p:a")
    assert exc.value.chain == ["//p:a", "//p:b", "//p:a"]

    # failures are never memoized
    with pytest.raises(CycleError):
        m.resolve("//p:a")


def test_self_parent_is_a_cycle():
    m = _model()
    m.add_platform("//p:self", [], parent="//p:self")
    with pytest.raises(CycleError):
        m.resolve("//p:self")


def test_list_platforms_sorted():
    assert _model().list_platforms() == ["//p:base", "//p:child", "//p:grandchild"]
