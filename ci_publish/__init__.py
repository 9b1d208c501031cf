"""
Script: ci_publish package
What: Holds Python workflow helpers that replaced the image publishing shell script.
Doing: Groups CLI entrypoints, tag naming rules, and shared docker/env helpers in one importable package.
Why: Keeps publish logic readable and testable instead of living in CI shell steps.
Goal: Provide a clear, maintainable home for image naming and publication logic.
"""
