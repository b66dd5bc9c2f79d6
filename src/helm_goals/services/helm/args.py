"""Helm command argument synthesis.

Merges the option lists of the global configuration, the goal
registration and the chart details into one argument list.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from helm_goals.integrations.helm.models import (
    Flag,
    HelmOption,
    KeyValue,
    RawOption,
    parse_options,
)

OptionSource = Iterable[RawOption | HelmOption] | None


def build_helm_args(
    global_options: OptionSource = None,
    goal_args: OptionSource = None,
    chart_options: OptionSource = None,
    config_files: Sequence[str] | None = None,
) -> list[str]:
    """Build the complete argument list for a helm command.

    Valued options are merged global -> goal -> chart, with later sources
    replacing earlier values for the same key. Bare flags from all sources
    are kept in the same order and are not deduplicated.

    The result holds ``-f <file>`` for each config file in order, then
    ``--<key> <value>`` for each merged option (in order of first
    appearance), then ``--<flag>`` for each bare flag.

    Args:
        global_options: Options from the helm configuration.
        goal_args: Options from the goal registration.
        chart_options: Options from the chart details.
        config_files: Values files passed with ``-f``.

    Returns:
        Ordered list of CLI arguments.
    """
    values: dict[str, str] = {}
    flags: list[str] = []

    for source in (global_options, goal_args, chart_options):
        for option in parse_options(source):
            if isinstance(option, KeyValue):
                values[option.key] = option.value
            elif isinstance(option, Flag):
                flags.append(option.name)

    args: list[str] = []
    for config_file in config_files or ():
        args.extend(["-f", config_file])
    for key, value in values.items():
        args.extend([f"--{key}", value])
    for name in flags:
        args.append(f"--{name}")
    return args
