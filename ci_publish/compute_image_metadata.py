"""
Script: ci_publish/compute_image_metadata.py
What: Generates image naming metadata for the build and publish steps.
Doing: Reads commit SHA and branch name, derives the release tag, and writes outputs for downstream steps.
Why: The build step needs the commit-tagged image name before anything is pushed.
Goal: Give the workflow one place that names the image for this run.
"""

from __future__ import annotations

from ci_publish.common import (
    StrictArgumentParser,
    first_env,
    optional_env,
    require_env,
    write_github_outputs,
)
from ci_publish.release_tags import DEFAULT_IMAGE, image_ref, plan_publication


# `GITHUB_HEAD_REF` is only set on pull_request runs; pushes use `GITHUB_REF_NAME`.
BRANCH_ENV_NAMES = ("BRANCH_NAME", "GITHUB_HEAD_REF", "GITHUB_REF_NAME")


def build_image_metadata(*, image: str, commit_sha: str, branch: str) -> dict[str, str]:
    plan = plan_publication(image=image, commit_tag=commit_sha, branch=branch)
    return {
        "tagged_image": plan.primary_ref,
        "release_tag": plan.release_tag,
        "release_image": image_ref(image, plan.release_tag),
        "publish_release_tag": "true" if plan.alias_ref else "false",
    }


def main(argv: list[str] | None = None) -> None:
    # All inputs come from workflow env; reject stray flags.
    StrictArgumentParser(
        prog="compute-image-metadata",
        description="Write image naming outputs for this run.",
    ).parse_args(argv)

    commit_sha = require_env("GITHUB_SHA")
    branch = first_env(BRANCH_ENV_NAMES)
    image = optional_env("PUBLISH_IMAGE") or DEFAULT_IMAGE

    metadata = build_image_metadata(image=image, commit_sha=commit_sha, branch=branch)

    # Consumed in workflow YAML as steps.prep.outputs.<name>.
    write_github_outputs(metadata)
    print(f"Tagged image: {metadata['tagged_image']}")
    print(f"Release tag: {metadata['release_tag']} (publish alias: {metadata['publish_release_tag']})")


if __name__ == "__main__":
    main()
