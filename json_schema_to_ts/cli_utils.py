"""
CLI utilities for command line reconstruction and introspection.
"""

from pathlib import Path

import click

COMMAND_NAME = "json_schema_to_ts"


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        # No active context, return basic command
        return COMMAND_NAME

    if not cli_args:
        return COMMAND_NAME

    cmd_parts = [COMMAND_NAME]
    arguments = []
    options = []

    for param in click_command.params:
        param_name = param.name
        if param_name not in cli_args:
            continue

        value = cli_args[param_name]
        if value is None or value == "" or value == ():
            continue

        # Skip options left at their default value
        if isinstance(param, click.Option) and value == param.default:
            continue

        if isinstance(value, (str, Path)):
            # File paths are shown by name only
            path_obj = Path(str(value))
            formatted_value = path_obj.name if path_obj.exists() else str(value)
        else:
            formatted_value = str(value)

        if isinstance(param, click.Argument):
            arguments.append(formatted_value)
        elif isinstance(param, click.Option):
            if param.is_flag:
                # Boolean flags are written as the flag matching their value
                flag = param.opts[0] if value else (param.secondary_opts or param.opts)[0]
                options.append(flag)
            else:
                flag = param.opts[0] if param.opts else f"--{param_name}"
                options.extend([flag, formatted_value])

    cmd_parts.extend(arguments)
    cmd_parts.extend(options)

    return " ".join(cmd_parts)
