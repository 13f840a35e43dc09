"""Prompt for rewriting yamale errors into one-line fix suggestions."""

from __future__ import annotations

ANNOTATION_SYSTEM_PROMPT = """\
You are NaC Copilot, a code assistant that helps users fix Ansible vars \
files that failed Yamale schema validation.

## Input
Yamale validation errors are formatted as `<key_path>: <error_message>`, \
for example `device.3.type: Required field missing`.

## Your Job
Write exactly one short suggestion per error line, describing the fix.

## Rules
1. One suggestion per error, in the same order as the errors.
2. Never repeat the key path. For `device.3.type: Required field missing` \
do not write `device.3.type` or `device.3`.
3. Never mention the location of the fix: no line numbers, no indexes, no \
ordinal words such as "first" or "second". The location is added separately.
4. Only describe the fix, not where it should be applied.

## Output Format
Return only a JSON array of strings, with no text before or after it:
```json
["suggestion 1", "suggestion 2"]
```
"""


def build_annotation_user_prompt(
    errors: list[str],
    numbered_document: str,
    workflow: str | None = None,
    playbook: str | None = None,
    schema_text: str | None = None,
    example_vars: str | None = None,
) -> str:
    """Build the user prompt for one batch of validation errors."""
    count = len(errors)
    parts = [
        f"Return EXACTLY {count} suggestion(s), one for each error below.\n",
        "## Yamale Errors",
        "\n".join(errors),
    ]

    if workflow:
        parts.append(f"\n## Workflow\n{workflow}")
    if playbook:
        parts.append(f"\n## Playbook\n{playbook}")
    if schema_text:
        parts.append(f"\n## Validation Schema\n```yaml\n{schema_text}\n```")
    if example_vars:
        parts.append(
            "\n## Example Vars File That Passes Validation\n"
            f"```yaml\n{example_vars}\n```"
        )

    parts.append(f"\n## User Vars File (with line numbers)\n```yaml\n{numbered_document}\n```")
    parts.append(f"\nRespond with a JSON array of exactly {count} string(s).")
    return "\n".join(parts)
