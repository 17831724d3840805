"""Built-in lifecycles.

The plugin coordinates below are pinned; downstream bindings depend on these
exact strings.
"""

from __future__ import annotations

from phasekit.model import (
    POST,
    PRE,
    TreeLifecycle,
    after,
    alias,
    lifecycle,
    phase,
)

CLEAN = "clean"
DEFAULT = "default"
SITE = "site"
WRAPPER = "wrapper"

MAVEN_CLEAN_PLUGIN_VERSION = "3.2.0"
MAVEN_SITE_PLUGIN_VERSION = "3.12.1"
MAVEN_WRAPPER_PLUGIN_VERSION = "3.2.0"

DEFAULT_PHASES: tuple[str, ...] = (
    "validate",
    "initialize",
    "generate-sources",
    "process-sources",
    "generate-resources",
    "process-resources",
    "compile",
    "process-classes",
    "generate-test-sources",
    "process-test-sources",
    "generate-test-resources",
    "process-test-resources",
    "test-compile",
    "process-test-classes",
    "test",
    "prepare-package",
    "package",
    "pre-integration-test",
    "integration-test",
    "post-integration-test",
    "verify",
    "install",
    "deploy",
)


def clean_lifecycle() -> TreeLifecycle:
    return lifecycle(
        CLEAN,
        [
            phase(
                "clean",
                f"org.apache.maven.plugins:maven-clean-plugin:{MAVEN_CLEAN_PLUGIN_VERSION}:clean",
            )
        ],
        aliases=[alias("pre-clean", PRE + "clean"), alias("post-clean", POST + "clean")],
    )


def default_lifecycle() -> TreeLifecycle:
    return lifecycle(
        DEFAULT,
        [
            phase("initialize", phase("validate")),
            phase("compile", after("initialize")),
            phase("test-compile", after("compile")),
            phase("test", after("test-compile")),
            phase("package", after("test")),
            phase("verify", after("package"), phase("integration-test", after("package"))),
            phase("install", after("verify")),
            phase("deploy", after("install")),
        ],
        aliases=[
            alias("generate-sources", "compile"),
            alias("process-sources", "compile"),
            alias("generate-resources", "compile"),
            alias("process-resources", "compile"),
            alias("process-classes", POST + "compile"),
            alias("generate-test-sources", "test-compile"),
            alias("process-test-sources", "test-compile"),
            alias("generate-test-resources", "test-compile"),
            alias("process-test-resources", "test-compile"),
            alias("process-test-classes", PRE + "test"),
            alias("prepare-package", "package"),
            alias("pre-integration-test", PRE + "integration-test"),
            alias("post-integration-test", POST + "integration-test"),
        ],
        ordered_phases=DEFAULT_PHASES,
    )


def site_lifecycle() -> TreeLifecycle:
    return lifecycle(
        SITE,
        [
            # site is nested so post-site lands before site-deploy's own work.
            # site-deploy's span now encloses site, so pre:site-deploy sorts
            # before site rather than after it.
            phase(
                "site-deploy",
                phase(
                    "site",
                    f"org.apache.maven.plugins:maven-site-plugin:{MAVEN_SITE_PLUGIN_VERSION}:site",
                ),
                f"org.apache.maven.plugins:maven-site-plugin:{MAVEN_SITE_PLUGIN_VERSION}:deploy",
            ),
        ],
        aliases=[alias("pre-site", PRE + "site"), alias("post-site", POST + "site")],
    )


def wrapper_lifecycle() -> TreeLifecycle:
    return lifecycle(
        WRAPPER,
        [
            phase(
                "wrapper",
                f"org.apache.maven.plugins:maven-wrapper-plugin:{MAVEN_WRAPPER_PLUGIN_VERSION}:wrapper",
            )
        ],
    )


def builtin_lifecycles() -> tuple[TreeLifecycle, ...]:
    return (clean_lifecycle(), default_lifecycle(), site_lifecycle(), wrapper_lifecycle())
