"""
Script: ci_publish/publish_image.py
What: Pushes the locally built image and its release alias to the registry.
Doing: Logs in, pushes `<image>:<commit tag>`, then tags and pushes `<image>:<release tag>` for release branches.
Why: Replaces the old `publish-image.sh` step with code that can be tested.
Goal: Publish every build by commit, and keep `stable`/`ci-*`/`vX.Y.Z` aliases current.
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, Sequence

from ci_publish.common import (
    StrictArgumentParser,
    docker_images,
    docker_login,
    docker_push,
    docker_tag,
    optional_env,
)
from ci_publish.release_tags import DEFAULT_IMAGE, PublishPlan, plan_publication


VALUE_FLAGS = ("-u", "-p", "-b", "-t", "-i", "-r")


def build_parser() -> StrictArgumentParser:
    parser = StrictArgumentParser(
        prog="publish-image",
        description="Log into the registry and push the image built for this commit.",
    )
    parser.add_argument("-u", dest="user", required=True, help="registry user")
    env_password = optional_env("PUBLISH_PASSWORD")
    parser.add_argument(
        "-p",
        dest="password",
        default=env_password or None,
        required=not env_password,
        help="registry password (default: $PUBLISH_PASSWORD)",
    )
    parser.add_argument("-b", dest="branch", required=True, help="current branch")
    parser.add_argument("-t", dest="tag", required=True, help="image tag (commit SHA)")
    parser.add_argument(
        "-i",
        "--image",
        default=optional_env("PUBLISH_IMAGE") or DEFAULT_IMAGE,
        help="image repository (default: $PUBLISH_IMAGE or %(default)s)",
    )
    parser.add_argument(
        "-r",
        "--registry",
        default=optional_env("PUBLISH_REGISTRY"),
        help="registry server for login (default: $PUBLISH_REGISTRY or Docker Hub)",
    )
    return parser


def attach_flag_values(argv: Sequence[str]) -> list[str]:
    """
    Glue a dash-leading value onto its short flag, so `-p -x` becomes `-p-x`.

    Short flags take the next word as their value whatever it looks like.
    argparse would read `-x` as another flag; the attached form it parses as
    `-p` with value `-x`.
    """
    words = iter(argv)
    result: list[str] = []
    for word in words:
        result.append(word)
        if word not in VALUE_FLAGS:
            continue
        value = next(words, None)
        if value is None:
            break
        if value.startswith("-"):
            result[-1] = word + value
        else:
            result.append(value)
    return result


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    words = sys.argv[1:] if argv is None else argv
    return build_parser().parse_args(attach_flag_values(words))


def publish(
    plan: PublishPlan,
    *,
    login: Callable[[], None],
    push: Callable[[str], None],
    tag: Callable[[str, str], None],
) -> None:
    """
    Run the registry steps for one plan, stopping at the first failure.

    Registry calls are passed in to keep this function easy to test.
    """
    login()

    push(plan.primary_ref)
    print(f"Pushed image: {plan.primary_ref}")

    if plan.alias_ref is None:
        print(f"Release tag {plan.release_tag} is not a release marker; no alias pushed.")
        return

    # Alias tag: same local image content, second name.
    tag(plan.primary_ref, plan.alias_ref)
    push(plan.alias_ref)
    print(f"Pushed release alias: {plan.primary_ref} -> {plan.alias_ref}")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    plan = plan_publication(image=args.image, commit_tag=args.tag, branch=args.branch)

    # Show what the build step loaded before pushing anything.
    docker_images()

    publish(
        plan,
        login=lambda: docker_login(args.user, args.password, registry=args.registry),
        push=docker_push,
        tag=docker_tag,
    )


if __name__ == "__main__":
    main()
