"""
Script: ci_publish/release_tags.py
What: Naming rules that map a branch to the image tags it publishes.
Doing: Derives the release tag from the branch, decides whether it is a release marker, and plans the pushes.
Why: Both the metadata step and the publish step must agree on the same tags.
Goal: Keep tag selection in pure functions that are easy to test.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


DEFAULT_IMAGE = "neonlabsorg/neon-governance"
MAIN_BRANCH = "main"
STABLE_TAG = "stable"
CI_TAG_PREFIX = "ci-"
VERSION_TAG_RE = re.compile(r"v[0-9]+\.[0-9]+\.[0-9]+")


@dataclass(frozen=True)
class PublishPlan:
    """Image references one publish run touches."""

    primary_ref: str
    release_tag: str
    alias_ref: str | None


def derive_release_tag(branch: str) -> str:
    """Return `stable` for the main branch, otherwise the branch name itself."""
    if branch == MAIN_BRANCH:
        return STABLE_TAG
    return branch


def is_release_marker(tag: str) -> bool:
    """
    True when `tag` should also be published as an alias of the commit image.

    Release markers are `stable`, any `ci-*` tag, and `vX.Y.Z` version tags.
    """
    if tag == STABLE_TAG:
        return True
    if tag.startswith(CI_TAG_PREFIX):
        return True
    return VERSION_TAG_RE.fullmatch(tag) is not None


def image_ref(image: str, tag: str) -> str:
    return f"{image}:{tag}"


def plan_publication(*, image: str, commit_tag: str, branch: str) -> PublishPlan:
    """
    Build the list of pushes for one run.

    The commit image is always pushed. The alias is set only when the branch
    maps to a release marker.
    """
    release_tag = derive_release_tag(branch)
    primary_ref = image_ref(image, commit_tag)
    alias_ref = image_ref(image, release_tag) if is_release_marker(release_tag) else None
    # Commit tag already equal to the marker: nothing extra to push.
    if alias_ref == primary_ref:
        alias_ref = None
    return PublishPlan(
        primary_ref=primary_ref,
        release_tag=release_tag,
        alias_ref=alias_ref,
    )
