import pytest

from phasekit.bindings import POM_PACKAGING, PackagingMapping, binding_plan
from phasekit.registry import LegacyLifecycleProvider, LifecycleRegistry


def test_builtin_goal_coordinates_are_pinned():
    registry = LifecycleRegistry.from_providers()

    assert binding_plan(registry, "clean") == (
        ("clean", ("org.apache.maven.plugins:maven-clean-plugin:3.2.0:clean",)),
    )
    assert binding_plan(registry, "site") == (
        ("site", ("org.apache.maven.plugins:maven-site-plugin:3.12.1:site",)),
        ("site-deploy", ("org.apache.maven.plugins:maven-site-plugin:3.12.1:deploy",)),
    )
    assert binding_plan(registry, "wrapper") == (
        ("wrapper", ("org.apache.maven.plugins:maven-wrapper-plugin:3.2.0:wrapper",)),
    )


def test_default_lifecycle_has_no_bindings_without_packaging():
    registry = LifecycleRegistry.from_providers()

    assert binding_plan(registry, "default") == ()


def test_pom_packaging_binds_install_and_deploy_in_phase_order():
    registry = LifecycleRegistry.from_providers()

    assert binding_plan(registry, "default", "pom") == (
        ("install", ("org.apache.maven.plugins:maven-install-plugin:3.0.0-M1:install",)),
        ("deploy", ("org.apache.maven.plugins:maven-deploy-plugin:3.0.0-M1:deploy",)),
    )


def test_packaging_goals_follow_lifecycle_default_goals():
    registry = LifecycleRegistry.from_providers()
    extra = PackagingMapping(
        packaging="docs",
        lifecycle_id="site",
        goals={"site": ["org.example:javadoc-plugin:3.6.0:aggregate"]},
    )

    plan = dict(binding_plan(registry, "site", "docs", mappings=(POM_PACKAGING, extra)))

    assert plan["site"] == (
        "org.apache.maven.plugins:maven-site-plugin:3.12.1:site",
        "org.example:javadoc-plugin:3.6.0:aggregate",
    )


def test_unknown_packaging_is_rejected():
    registry = LifecycleRegistry.from_providers()

    with pytest.raises(ValueError, match=r"Unknown packaging: war"):
        binding_plan(registry, "default", "war")


def test_legacy_lifecycle_binds_in_declared_order():
    registry = LifecycleRegistry.from_providers(
        [
            LegacyLifecycleProvider(
                {"housekeeping": {"phases": ["tidy", "archive"], "goals": {"archive": "g:a:1:single"}}}
            )
        ]
    )

    assert binding_plan(registry, "housekeeping") == (("archive", ("g:a:1:single",)),)
