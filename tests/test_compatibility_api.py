PKG = "//target_skipping"


def test_evaluate_compatible(client, declarations_doc):
    r = client.post(
        "/api/v1/compatibility/evaluate",
        json={
            "declarations": declarations_doc,
            "target": "pass_on_foo1_or_foo2_but_not_on_foo3",
            "platform": "foo1_bar1_platform",
        },
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["compatible"] is True
    assert body["failing"] == []
    assert body["diagnostic"] is None
    assert body["target"] == f"{PKG}:pass_on_foo1_or_foo2_but_not_on_foo3"


def test_evaluate_incompatible_lists_failures_in_order(client, declarations_doc):
    r = client.post(
        "/api/v1/compatibility/evaluate",
        json={
            "declarations": declarations_doc,
            "target": ":pass_on_foo1_or_foo2_but_not_bar1",
            "platform": ":bar1_platform",
        },
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["compatible"] is False
    assert body["failing"] == ["//lib/compatibility:any_of", "//lib/compatibility:none_of"]
    assert body["diagnostic"] == (
        f"target platform ({PKG}:bar1_platform) didn't satisfy constraints "
        "[//lib/compatibility:any_of, //lib/compatibility:none_of]"
    )


def test_evaluate_unknown_platform_is_400(client, declarations_doc):
    r = client.post(
        "/api/v1/compatibility/evaluate",
        json={"declarations": declarations_doc, "target": "always_compatible", "platform": "nope"},
    )
    assert r.status_code == 400
    assert "nope" in r.json()["detail"]


def test_evaluate_invalid_declarations_is_400(client, declarations_doc):
    declarations_doc["targets"].append({"name": "bad", "target_compatible_with": [{"all_of": []}]})
    r = client.post(
        "/api/v1/compatibility/evaluate",
        json={"declarations": declarations_doc, "target": "bad", "platform": "foo3_platform"},
    )
    assert r.status_code == 400
    assert "all_of" in r.json()["detail"]


def test_build_outcome(client, declarations_doc):
    r = client.post(
        "/api/v1/compatibility/build",
        json={
            "declarations": declarations_doc,
            "targets": ["pass_on_only_foo1_and_bar1", "pass_on_everything_but_foo1_and_foo2"],
            "transitive_targets": ["pass_on_foo1_or_foo2_but_not_on_foo3"],
            "target_platform": "foo3_platform",
            "host_platform": "//host:platform",
        },
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["exit_code"] == 1
    assert body["success"] is False
    assert body["built"] == [f"{PKG}:pass_on_everything_but_foo1_and_foo2"]
    assert body["skipped"] == [f"{PKG}:pass_on_foo1_or_foo2_but_not_on_foo3"]
    assert len(body["reports"]) == 1
    assert body["log"][-1] == "FAILED: Build did NOT complete successfully"


def test_build_with_skip_flag(client, declarations_doc):
    r = client.post(
        "/api/v1/compatibility/build",
        json={
            "declarations": declarations_doc,
            "targets": ["pass_on_only_foo1_and_bar1"],
            "target_platform": "foo3_platform",
            "skip_incompatible_targets": True,
        },
    )
    body = r.json()
    assert body["exit_code"] == 0
    assert body["log"][-1] == "INFO: Build completed successfully"


def test_build_cycle_is_400(client, declarations_doc):
    declarations_doc["platforms"] += [
        {"name": "loop_a", "parent": "loop_b"},
        {"name": "loop_b", "parent": "loop_a"},
    ]
    r = client.post(
        "/api/v1/compatibility/build",
        json={"declarations": declarations_doc, "targets": ["always_compatible"], "target_platform": "loop_a"},
    )
    assert r.status_code == 400
    assert "cycle" in r.json()["detail"]


def test_target_with_undeclared_value_is_400(client, declarations_doc):
    declarations_doc["targets"].append({"name": "typo", "target_compatible_with": [{"none_of": [":fooo1"]}]})
    r = client.post(
        "/api/v1/compatibility/evaluate",
        json={"declarations": declarations_doc, "target": "typo", "platform": "foo3_platform"},
        headers={"X-Request-Id": "rid-typo"},
    )
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "ConfigurationError"
    assert "//target_skipping:fooo1" in body["detail"]
    assert body["request_id"] == "rid-typo"


def test_unknown_platform_error_carries_label(client, declarations_doc):
    r = client.post(
        "/api/v1/compatibility/build",
        json={"declarations": declarations_doc, "targets": ["always_compatible"], "target_platform": "nope"},
    )
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "UnknownConstraintError"
    assert body["label"] == "//target_skipping:nope"
    assert body["request_id"]


def test_cycle_error_carries_chain(client, declarations_doc):
    declarations_doc["platforms"] += [
        {"name": "loop_a", "parent": "loop_b"},
        {"name": "loop_b", "parent": "loop_a"},
    ]
    r = client.post(
        "/api/v1/compatibility/evaluate",
        json={"declarations": declarations_doc, "target": "always_compatible", "platform": "loop_a"},
    )
    assert r.status_code == 400
    assert r.json()["chain"] == [
        "//target_skipping:loop_a",
        "//target_skipping:loop_b",
        "//target_skipping:loop_a",
    ]
