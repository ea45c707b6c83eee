"""
Stack output helpers.

Writes deployed stack outputs to a dotenv file so local tooling (the image
builder, the webapp run against a real database) can pick them up.
"""

from collections.abc import Mapping
from pathlib import Path

import pulumi


def render_env_file(values: Mapping[str, object]) -> str:
    """
    Render output values as dotenv lines.

    Keys are upper-cased, None values are skipped, insertion order is kept.
    """
    lines = [
        f"{key.upper()}={value}"
        for key, value in values.items()
        if value is not None
    ]
    return "\n".join(lines) + "\n"


def write_outputs_to_env(
    outputs: Mapping[str, pulumi.Input[object]],
    filename: str,
    directory: Path | None = None,
) -> pulumi.Output[str] | None:
    """
    Write resolved stack outputs to a dotenv file.

    Skipped during previews, where most outputs are still unknown.

    Args:
        outputs: Export name to value (plain or Output)
        filename: Target file name
        directory: Target directory (defaults to the working directory)

    Returns:
        Output resolving to the written path, or None during preview
    """
    if pulumi.runtime.is_dry_run():
        pulumi.log.info(f"Preview: not writing {filename}")
        return None

    path = (directory or Path.cwd()) / filename

    def _write(values: dict[str, object]) -> str:
        path.write_text(render_env_file(values), encoding="utf-8")
        pulumi.log.info(f"Wrote {len(values)} outputs to {path}")
        return str(path)

    return pulumi.Output.all(**outputs).apply(_write)
