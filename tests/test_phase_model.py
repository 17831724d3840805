import dataclasses

import pytest

from phasekit.model import (
    POST,
    PRE,
    RUN,
    Alias,
    AliasPlacement,
    GoalRef,
    LinkKind,
    MapLifecycle,
    Phase,
    PointerScope,
    TreeLifecycle,
    after,
    alias,
    before,
    lifecycle,
    phase,
)


def test_phase_builder_sorts_children_links_and_goal():
    built = phase(
        "test",
        after("compile"),
        phase("unit"),
        "org.example:test-plugin:1.0:run",
        before("package", PointerScope.CHILDREN),
    )

    assert built.name == "test"
    assert [child.name for child in built.phases] == ["unit"]
    assert [(link.kind, link.phase) for link in built.links] == [
        (LinkKind.AFTER, "compile"),
        (LinkKind.BEFORE, "package"),
    ]
    assert built.links[0].in_project is True
    assert built.links[1].in_project is False
    assert built.goal == "org.example:test-plugin:1.0:run"


def test_phase_builder_rejects_two_goals():
    with pytest.raises(ValueError, match=r"more than one goal"):
        phase("clean", "a:b:1:c", "a:b:1:d")


def test_phase_name_is_stripped_and_required():
    assert Phase("  compile ").name == "compile"
    with pytest.raises(TypeError, match=r"Phase.name must be a non-empty string"):
        Phase("   ")


def test_phase_walk_visits_parent_before_children_in_declared_order():
    tree = phase("all", phase("build", phase("initialize"), phase("compile")), phase("verify"))

    assert [p.name for p in tree.walk()] == ["all", "build", "initialize", "compile", "verify"]


def test_phase_is_immutable():
    built = phase("compile")
    with pytest.raises(dataclasses.FrozenInstanceError):
        built.name = "other"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("target", "placement", "phase_name"),
    [
        ("sources", AliasPlacement.RUN, "sources"),
        (RUN + "sources", AliasPlacement.RUN, "sources"),
        (PRE + "sources", AliasPlacement.PRE, "sources"),
        (POST + "sources", AliasPlacement.POST, "sources"),
    ],
)
def test_alias_parses_placement_qualifier(target, placement, phase_name):
    entry = alias("generate-sources", target)

    assert entry.placement is placement
    assert entry.phase == phase_name


def test_alias_rejects_unknown_qualifier():
    with pytest.raises(ValueError, match=r"qualifier must be one of: pre, run, post"):
        Alias("generate-sources", "during:sources")


def test_alias_rejects_missing_target_phase():
    with pytest.raises(TypeError, match=r"Alias.target phase must be a non-empty string"):
        Alias("generate-sources", "pre:")


def test_goal_ref_round_trips_coordinate():
    coordinate = "org.apache.maven.plugins:maven-clean-plugin:3.2.0:clean"
    ref = GoalRef.parse(coordinate)

    assert ref.group_id == "org.apache.maven.plugins"
    assert ref.artifact_id == "maven-clean-plugin"
    assert ref.version == "3.2.0"
    assert ref.goal == "clean"
    assert str(ref) == coordinate


def test_goal_ref_rejects_short_coordinates():
    with pytest.raises(ValueError, match=r"groupId:artifactId:version:goal"):
        GoalRef.parse("maven-clean-plugin:clean")


def test_tree_lifecycle_flattens_phases_and_collects_goals():
    declared = lifecycle(
        "site",
        [phase("site-deploy", phase("site", "g:site:1:site"), "g:site:1:deploy")],
        aliases=[alias("pre-site", PRE + "site")],
    )

    assert isinstance(declared, TreeLifecycle)
    assert [p.name for p in declared.all_phases()] == ["site-deploy", "site"]
    assert dict(declared.goals()) == {"site-deploy": "g:site:1:deploy", "site": "g:site:1:site"}
    assert declared.ordered_phases is None


def test_map_lifecycle_normalizes_phases_and_goals():
    legacy = MapLifecycle("old", phases=[" tidy", "archive "], default_goals={"archive": "g:a:1:x"})

    assert legacy.phases == ("tidy", "archive")
    assert dict(legacy.goals()) == {"archive": "g:a:1:x"}
